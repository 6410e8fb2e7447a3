"""
Category-aware pagination of product cards onto a page grid.
"""

# Standard Library
import dataclasses
import enum

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config
import product_catalog_pdf.geometry
import product_catalog_pdf.products
import product_catalog_pdf.render
import product_catalog_pdf.session


CatalogSettings = pcp.config.CatalogSettings
CategoryGroup = pcp.products.CategoryGroup
LayoutGeometry = pcp.geometry.LayoutGeometry
LayoutTemplate = pcp.config.LayoutTemplate
NamedTemplate = pcp.config.NamedTemplate
RenderSession = pcp.session.RenderSession

CATEGORY_GAP = pcp.config.CATEGORY_GAP
PROGRESS_UPDATE_EVERY = pcp.config.PROGRESS_UPDATE_EVERY
# float slack for the bottom margin comparison
LAYOUT_EPSILON = 1e-6


class PaginationState(enum.Enum):
	AT_CATEGORY_START = "at_category_start"
	PLACING_CARD = "placing_card"
	PAGE_FULL = "page_full"
	DONE = "done"


@dataclasses.dataclass(frozen=True)
class CardPlacement:
	page_index: int
	category_name: str
	product_id: str
	slot: int
	row: int
	column: int
	x: float
	y: float
	width: float
	height: float

	@property
	def bottom(self) -> float:
		return self.y + self.height


@dataclasses.dataclass(frozen=True)
class TitlePlacement:
	page_index: int
	category_name: str
	y: float
	cards_on_current_page: int


@dataclasses.dataclass
class LayoutReport:
	cards: list[CardPlacement] = dataclasses.field(default_factory=list)
	titles: list[TitlePlacement] = dataclasses.field(default_factory=list)
	skipped_categories: list[str] = dataclasses.field(default_factory=list)

	def cards_for_category(self, category_name: str) -> list[CardPlacement]:
		return [card for card in self.cards if card.category_name == category_name]

	@property
	def page_indices(self) -> list[int]:
		return sorted({card.page_index for card in self.cards} | {title.page_index for title in self.titles})


@dataclasses.dataclass(frozen=True)
class CategoryPlan:
	group: CategoryGroup
	template: LayoutTemplate | None
	settings: CatalogSettings


#============================================
def plan_categories(
	session: RenderSession,
	groups: list[CategoryGroup],
	category_templates: dict[str, str] | None,
	registry: dict[str, NamedTemplate] | None,
	report: LayoutReport,
) -> list[CategoryPlan]:
	"""
	Pair each category with the template and settings it renders with.

	Without a category map every category uses the session template and
	settings. With one, a category whose template id is unmapped or
	unregistered is skipped and recorded, and a mapped category takes its
	template's settings override.

	Args:
		session: Render session.
		groups: Sorted category groups.
		category_templates: Category name to template id, or None.
		registry: Template id to NamedTemplate.
		report: Report receiving skipped categories.

	Returns:
		Renderable category plans in order.
	"""
	if category_templates is None:
		return [
			CategoryPlan(group=group, template=session.template, settings=session.settings)
			for group in groups
		]

	registry = registry or {}
	plans: list[CategoryPlan] = []
	for group in groups:
		template_id = category_templates.get(group.category_name)
		if template_id is None:
			report.skipped_categories.append(group.category_name)
			session.warn(f"No template mapped for category '{group.category_name}', skipped")
			continue
		named = registry.get(template_id)
		if named is None:
			report.skipped_categories.append(group.category_name)
			session.warn(
				f"Template '{template_id}' for category '{group.category_name}' is not registered, skipped"
			)
			continue
		plans.append(
			CategoryPlan(
				group=group,
				template=named.layout,
				settings=session.settings.with_override(named.settings_override),
			)
		)
	return plans


class PaginationEngine:
	"""
	Walks category groups and places each card on the page grid.

	The cursor lives on the session. Each category renders through a
	sibling session carrying that category's template and settings, so
	the shared target and cursor advance across categories. Geometry is
	recomputed for a category whose settings differ from the run's.
	"""

	def __init__(self, session: RenderSession, geometry: LayoutGeometry):
		self.session = session
		self.base_geometry = geometry
		self.state = PaginationState.AT_CATEGORY_START
		self.report = LayoutReport()
		self.remaining = 0
		self.placed = 0
		self.total = 0
		self.use_category(session)

	def use_category(self, category_session: RenderSession) -> None:
		"""
		Switch page, grid, title and geometry to a category's settings.
		"""
		settings = category_session.settings
		self.category_session = category_session
		self.page = settings.page
		self.grid = settings.grid
		self.title_reserve = settings.title_style.margin_bottom
		if settings == self.session.settings:
			self.geometry = self.base_geometry
		else:
			self.geometry = pcp.geometry.compute_layout_geometry(
				self.page,
				self.grid,
				title_reserve=self.title_reserve,
			)

	def _bottom_limit(self) -> float:
		return self.page.printable_bottom + LAYOUT_EPSILON

	def start_page(self) -> None:
		cursor = self.session.cursor
		cursor.page_index = self.session.target.new_page()
		cursor.content_y = self.page.margin_top
		cursor.cards_on_current_page = 0
		cursor.has_content = False

	def begin_category(self, category_name: str) -> None:
		self.state = PaginationState.AT_CATEGORY_START
		cursor = self.session.cursor
		needed = cursor.content_y + self.title_reserve + self.geometry.card_h
		if cursor.has_content and needed > self._bottom_limit():
			self.start_page()
		title_y = cursor.content_y
		cursor.content_y = pcp.render.draw_category_title(self.category_session, category_name, title_y)
		cursor.cards_on_current_page = 0
		cursor.has_content = True
		self.report.titles.append(
			TitlePlacement(
				page_index=cursor.page_index,
				category_name=category_name,
				y=title_y,
				cards_on_current_page=cursor.cards_on_current_page,
			)
		)
		if self.session.verbose:
			print(f"Category: {category_name} (page {cursor.page_index + 1})")

	async def place_card(self, category_name: str, product) -> None:
		self.state = PaginationState.PLACING_CARD
		cursor = self.session.cursor
		row, column, x, y = pcp.geometry.compute_cell_origin(
			self.page,
			self.grid,
			self.geometry,
			cursor.content_y,
			cursor.cards_on_current_page,
		)
		if y + self.geometry.card_h > self._bottom_limit() and cursor.has_content:
			self.state = PaginationState.PAGE_FULL
			self.start_page()
			row, column, x, y = pcp.geometry.compute_cell_origin(
				self.page,
				self.grid,
				self.geometry,
				cursor.content_y,
				0,
			)
			self.state = PaginationState.PLACING_CARD

		await pcp.render.render_card(
			self.category_session,
			product,
			x,
			y,
			self.geometry.card_w,
			self.geometry.card_h,
		)
		self.report.cards.append(
			CardPlacement(
				page_index=cursor.page_index,
				category_name=category_name,
				product_id=product.product_id,
				slot=cursor.cards_on_current_page,
				row=row,
				column=column,
				x=x,
				y=y,
				width=self.geometry.card_w,
				height=self.geometry.card_h,
			)
		)
		cursor.cards_on_current_page += 1
		cursor.has_content = True
		self.placed += 1
		self.remaining -= 1

		if cursor.cards_on_current_page == self.grid.capacity and self.remaining > 0:
			self.state = PaginationState.PAGE_FULL
			self.start_page()

	def end_category(self, product_count: int) -> None:
		cursor = self.session.cursor
		if product_count == 0:
			cursor.content_y += CATEGORY_GAP
			return
		if cursor.cards_on_current_page == 0:
			# the last card filled the page and a fresh page was started
			return
		columns = max(1, self.grid.columns)
		last_row = (cursor.cards_on_current_page - 1) // columns
		cursor.content_y += (
			last_row * (self.geometry.card_h + self.grid.row_spacing)
			+ self.geometry.card_h
			+ CATEGORY_GAP
		)

	async def run(
		self,
		groups: list[CategoryGroup],
		category_templates: dict[str, str] | None = None,
		registry: dict[str, NamedTemplate] | None = None,
	) -> LayoutReport:
		"""
		Paginate all groups onto the session's target.

		A content page must already be open on the target.

		Args:
			groups: Sorted category groups.
			category_templates: Category map for multi-template mode.
			registry: Template registry for multi-template mode.

		Returns:
			LayoutReport with every placement.
		"""
		plans = plan_categories(self.session, groups, category_templates, registry, self.report)
		self.total = sum(len(plan.group.products) for plan in plans)
		self.remaining = self.total
		verbose = self.session.verbose

		for plan in plans:
			self.use_category(self.session.with_category(plan.template, plan.settings))
			category_name = plan.group.category_name
			self.begin_category(category_name)
			for product in plan.group.products:
				await self.place_card(category_name, product)
				if verbose and (self.placed % PROGRESS_UPDATE_EVERY == 0 or self.placed == self.total):
					pcp.render.print_progress("Cards", self.placed, self.total)
			self.end_category(len(plan.group.products))
			if verbose and plan.group.products:
				print()

		self.state = PaginationState.DONE
		return self.report


#============================================
async def paginate(
	session: RenderSession,
	groups: list[CategoryGroup],
	geometry: LayoutGeometry,
	category_templates: dict[str, str] | None = None,
	registry: dict[str, NamedTemplate] | None = None,
) -> LayoutReport:
	"""
	Open a content page and paginate category groups onto it.

	Args:
		session: Render session.
		groups: Sorted category groups.
		geometry: Layout geometry for the run's own settings.
		category_templates: Category map for multi-template mode.
		registry: Template registry for multi-template mode.

	Returns:
		LayoutReport.
	"""
	engine = PaginationEngine(session, geometry)
	engine.start_page()
	return await engine.run(groups, category_templates, registry)
