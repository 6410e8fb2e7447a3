"""
Page, grid, and card geometry.
"""

# Standard Library
import dataclasses

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config


PageSpec = pcp.config.PageSpec
GridSpec = pcp.config.GridSpec
ElementSpec = pcp.config.ElementSpec

PAPER_SIZES = pcp.config.PAPER_SIZES
MIN_DIMENSION = pcp.config.MIN_DIMENSION


@dataclasses.dataclass(frozen=True)
class LayoutGeometry:
	page_w: float
	page_h: float
	content_w: float
	content_h: float
	card_w: float
	card_h: float


#============================================
def clamp_dimension(value: float) -> float:
	"""
	Clamp a computed dimension to the minimum positive size.

	Args:
		value: Computed dimension.

	Returns:
		Value, or MIN_DIMENSION when the value is not positive enough.
	"""
	if value < MIN_DIMENSION:
		return MIN_DIMENSION
	return value


#============================================
def resolve_page_size(
	paper_size: str,
	orientation: str,
	custom_width: float | None = None,
	custom_height: float | None = None,
) -> tuple[float, float]:
	"""
	Resolve a paper size name and orientation into page dimensions.

	Args:
		paper_size: Paper size name (A3, A4, A5, Letter, Custom).
		orientation: "portrait" or "landscape".
		custom_width: Width for Custom paper.
		custom_height: Height for Custom paper.

	Returns:
		Tuple of (width_mm, height_mm).
	"""
	normalized = paper_size.strip().upper()
	default_width, default_height = PAPER_SIZES["A4"]
	if normalized == "CUSTOM":
		width = custom_width if custom_width is not None else default_width
		height = custom_height if custom_height is not None else default_height
	else:
		width, height = PAPER_SIZES.get(normalized, (default_width, default_height))
	width = clamp_dimension(width)
	height = clamp_dimension(height)

	if orientation.strip().lower() == "landscape" and height > width:
		width, height = height, width
	return (width, height)


#============================================
def compute_layout_geometry(
	page: PageSpec,
	grid: GridSpec,
	title_reserve: float = 0.0,
) -> LayoutGeometry:
	"""
	Derive content area and card size from page and grid settings.

	Card height is the smaller of the grid formula and the grid's
	max_card_height cap. Degenerate inputs clamp to MIN_DIMENSION.

	Args:
		page: Page settings.
		grid: Grid settings.
		title_reserve: Vertical space reserved for a category title.

	Returns:
		LayoutGeometry.
	"""
	rows = max(1, grid.rows)
	columns = max(1, grid.columns)
	content_w = clamp_dimension(page.width_mm - page.margin_left - page.margin_right)
	content_h = clamp_dimension(
		page.height_mm - page.margin_top - page.margin_bottom - title_reserve
	)
	card_w = clamp_dimension((content_w - grid.card_spacing * (columns - 1)) / columns)
	card_h = (content_h - grid.row_spacing * (rows - 1)) / rows
	if grid.max_card_height is not None:
		card_h = min(card_h, grid.max_card_height)
	card_h = clamp_dimension(card_h)
	return LayoutGeometry(
		page_w=page.width_mm,
		page_h=page.height_mm,
		content_w=content_w,
		content_h=content_h,
		card_w=card_w,
		card_h=card_h,
	)


#============================================
def compute_cell_origin(
	page: PageSpec,
	grid: GridSpec,
	geometry: LayoutGeometry,
	content_y: float,
	slot: int,
) -> tuple[int, int, float, float]:
	"""
	Compute the grid cell for a slot counted from a row origin.

	Args:
		page: Page settings.
		grid: Grid settings.
		geometry: Layout geometry.
		content_y: Top of the first grid row.
		slot: Zero-based card counter since content_y.

	Returns:
		Tuple of (row, col, x, y).
	"""
	columns = max(1, grid.columns)
	row = slot // columns
	col = slot % columns
	x = page.margin_left + col * (geometry.card_w + grid.card_spacing)
	y = content_y + row * (geometry.card_h + grid.row_spacing)
	return (row, col, x, y)


#============================================
def map_element_rect(
	element: ElementSpec,
	target_x: float,
	target_y: float,
	target_w: float,
	target_h: float,
	ref_w: float,
	ref_h: float,
) -> tuple[float, float, float, float]:
	"""
	Map an element from the reference canvas onto a card rectangle.

	The horizontal and vertical scales are independent, so a card with a
	different aspect ratio than the reference stretches the layout.

	Args:
		element: Element authored in reference coordinates.
		target_x: Card x origin.
		target_y: Card y origin.
		target_w: Card width.
		target_h: Card height.
		ref_w: Reference canvas width.
		ref_h: Reference canvas height.

	Returns:
		Tuple of (abs_x, abs_y, abs_w, abs_h).
	"""
	scale_x = target_w / clamp_dimension(ref_w)
	scale_y = target_h / clamp_dimension(ref_h)
	abs_x = target_x + element.ref_x * scale_x
	abs_y = target_y + element.ref_y * scale_y
	abs_w = element.ref_w * scale_x
	abs_h = element.ref_h * scale_y
	return (abs_x, abs_y, abs_w, abs_h)


#============================================
def compute_align_offset(available: float, used: float, align: str) -> float:
	"""
	Compute a horizontal alignment offset.

	Args:
		available: Available width.
		used: Used width.
		align: "left", "center", or "right".

	Returns:
		Offset in millimetres.
	"""
	normalized = align.strip().lower()
	if normalized == "right":
		return max(0.0, available - used)
	if normalized == "center":
		return max(0.0, (available - used) / 2.0)
	return 0.0
