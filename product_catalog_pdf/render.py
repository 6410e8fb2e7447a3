"""
Card, element, title, and cover rendering.
"""

# Standard Library
import datetime
import re

# PIP3 modules
import PIL.ImageOps
import reportlab.lib.utils

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config
import product_catalog_pdf.content
import product_catalog_pdf.geometry
import product_catalog_pdf.images
import product_catalog_pdf.products
import product_catalog_pdf.session
import product_catalog_pdf.target


ContentKind = pcp.config.ContentKind
CoverSpec = pcp.config.CoverSpec
ElementSpec = pcp.config.ElementSpec
ProductRecord = pcp.products.ProductRecord
RenderSession = pcp.session.RenderSession
TextRun = pcp.content.TextRun
ImageLoadError = pcp.images.ImageLoadError

points_to_mm = pcp.config.points_to_mm
mm_to_points = pcp.config.mm_to_points

DEFAULT_FONT_REGULAR = pcp.config.DEFAULT_FONT_REGULAR
DEFAULT_FONT_BOLD = pcp.config.DEFAULT_FONT_BOLD
FONT_FAMILIES = pcp.config.FONT_FAMILIES
BOLD_WEIGHT = pcp.config.BOLD_WEIGHT
TEXT_LEADING = pcp.config.TEXT_LEADING
MIN_DIMENSION = pcp.config.MIN_DIMENSION
PROGRESS_BAR_WIDTH = pcp.config.PROGRESS_BAR_WIDTH

TOKEN_PATTERN = re.compile(r"\S+|\s+")


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def font_pair(family: str | None) -> tuple[str, str]:
	"""
	Map a font family name to ReportLab regular and bold faces.

	Args:
		family: Family name such as "Helvetica" or "Times New Roman".

	Returns:
		Tuple of (regular_font, bold_font).
	"""
	if not family:
		return (DEFAULT_FONT_REGULAR, DEFAULT_FONT_BOLD)
	return FONT_FAMILIES.get(family.strip().lower(), (DEFAULT_FONT_REGULAR, DEFAULT_FONT_BOLD))


#============================================
def map_font_name(weight: int, family: str | None = None) -> str:
	"""
	Map a font weight to a PDF font name.

	Args:
		weight: Font weight.
		family: Optional family name.

	Returns:
		ReportLab font name.
	"""
	regular, bold = font_pair(family)
	if weight >= BOLD_WEIGHT:
		return bold
	return regular


#============================================
def wrap_text(text: str, font_name: str, font_size: float, max_width: float) -> list[str]:
	"""
	Wrap plain text to a width.

	Args:
		text: Text content.
		font_name: ReportLab font name.
		font_size: Font size in points.
		max_width: Width in millimetres.

	Returns:
		Wrapped lines.
	"""
	if not text:
		return []
	lines = reportlab.lib.utils.simpleSplit(text, font_name, font_size, mm_to_points(max_width))
	return lines or [text]


#============================================
def wrap_runs(
	runs: list[TextRun],
	max_width: float,
	font_size: float,
	regular_font: str,
	bold_font: str,
	measure,
) -> list[list[TextRun]]:
	"""
	Greedily wrap styled runs into lines.

	Words never split; a word wider than the line sits on its own line.

	Args:
		runs: Styled text runs.
		max_width: Line width in millimetres.
		font_size: Font size in points.
		regular_font: Font for plain runs.
		bold_font: Font for bold runs.
		measure: Callable (text, font_name, font_size) -> width in mm.

	Returns:
		Lines of runs, adjacent same-style pieces merged.
	"""
	lines: list[list[tuple[str, bool]]] = []
	current: list[tuple[str, bool]] = []
	current_width = 0.0
	for run in runs:
		font_name = bold_font if run.bold else regular_font
		for line_index, segment in enumerate(run.text.split("\n")):
			if line_index > 0:
				lines.append(current)
				current = []
				current_width = 0.0
			for token in TOKEN_PATTERN.findall(segment):
				is_space = token.isspace()
				if is_space and not current:
					continue
				token_width = measure(token, font_name, font_size)
				if not is_space and current and current_width + token_width > max_width:
					lines.append(current)
					current = []
					current_width = 0.0
				current.append((token, run.bold))
				current_width += token_width
	if current:
		lines.append(current)

	merged_lines: list[list[TextRun]] = []
	for line in lines:
		while line and line[-1][0].isspace():
			line = line[:-1]
		merged: list[TextRun] = []
		for text, bold in line:
			if merged and merged[-1].bold == bold:
				merged[-1] = TextRun(merged[-1].text + text, bold)
			else:
				merged.append(TextRun(text, bold))
		if merged:
			merged_lines.append(merged)
	return merged_lines


#============================================
def draw_photo_placeholder(session: RenderSession, x: float, y: float, size: float) -> None:
	"""
	Draw the gray "no photo" disc.

	Args:
		session: Render session.
		x: Left edge.
		y: Top edge.
		size: Diameter.
	"""
	target = session.target
	center_x = x + size / 2.0
	center_y = y + size / 2.0
	radius = size / 2.0
	target.draw_circle(
		center_x,
		center_y,
		radius,
		fill_color=pcp.config.PLACEHOLDER_FILL,
		stroke_color=pcp.config.PLACEHOLDER_STROKE,
		line_width=pcp.config.PLACEHOLDER_STROKE_WIDTH,
	)
	top_line, bottom_line = pcp.config.PLACEHOLDER_LINES
	for text, baseline in ((top_line, center_y - 0.5), (bottom_line, center_y + 2.5)):
		target.draw_text(
			center_x,
			baseline,
			text,
			DEFAULT_FONT_REGULAR,
			pcp.config.PLACEHOLDER_TEXT_SIZE,
			pcp.config.PLACEHOLDER_TEXT_COLOR,
			align="center",
		)


#============================================
async def draw_circular_photo(
	session: RenderSession,
	source: str | None,
	x: float,
	y: float,
	size: float,
	stroke_width: float = 0.0,
	stroke_color: str | None = None,
) -> bool:
	"""
	Draw a circularly cropped photo, or the placeholder.

	Args:
		session: Render session.
		source: Photo source, or None.
		x: Left edge.
		y: Top edge.
		size: Diameter.
		stroke_width: Circle stroke width in millimetres.
		stroke_color: Circle stroke color.

	Returns:
		True when the photo was drawn, False when the placeholder was used.
	"""
	if size <= 0:
		return False
	if not source or session.image_loader is None:
		draw_photo_placeholder(session, x, y, size)
		return False
	try:
		image = await session.image_loader.load(source)
	except ImageLoadError as error:
		session.warn(f"Image fallback: {error}")
		draw_photo_placeholder(session, x, y, size)
		return False
	pixels_per_mm = pcp.config.IMAGE_PIXELS_PER_MM
	cropped = pcp.images.crop_circular(
		image,
		round(size * pixels_per_mm),
		inset=round(pcp.config.CIRCLE_INSET_MM * pixels_per_mm),
		stroke_width=round(stroke_width * pixels_per_mm),
		stroke_color=stroke_color,
	)
	session.target.draw_image(cropped, x, y, size, size)
	return True


#============================================
async def render_default_card(
	session: RenderSession,
	product: ProductRecord,
	x: float,
	y: float,
	width: float,
	height: float,
) -> None:
	"""
	Draw the built-in card: photo on the left, text stack on the right.

	Args:
		session: Render session.
		product: Product record.
		x: Card left edge.
		y: Card top edge.
		width: Card width.
		height: Card height.
	"""
	target = session.target
	style = session.settings.card_style
	fonts = session.settings.fonts
	target.draw_rect(
		x,
		y,
		width,
		height,
		fill_color=style.background_color,
		stroke_color=style.border_color,
		line_width=style.border_width,
	)

	margin = pcp.config.CARD_PHOTO_MARGIN
	photo_size = max(0.0, min(height - 2.0 * margin, width * 0.3))
	photo_x = x + margin
	photo_y = y + (height - photo_size) / 2.0
	await draw_circular_photo(session, product.photo_url, photo_x, photo_y, photo_size)

	text_x = photo_x + photo_size + pcp.config.CARD_TEXT_GAP
	text_width = max(MIN_DIMENSION, width - photo_size - 2.0 * margin - pcp.config.CARD_TEXT_GAP)
	current_y = y + pcp.config.CARD_TEXT_TOP
	line_step = pcp.config.CARD_LINE_STEP

	name_lines = wrap_text(product.name, DEFAULT_FONT_BOLD, fonts.title_size, text_width)
	for index, line in enumerate(name_lines):
		target.draw_text(
			text_x,
			current_y + index * points_to_mm(fonts.title_size) * TEXT_LEADING,
			line,
			DEFAULT_FONT_BOLD,
			fonts.title_size,
			pcp.config.CARD_NAME_COLOR,
		)
	current_y += len(name_lines) * line_step

	target.draw_text(
		text_x,
		current_y,
		f"Código: {product.internal_code}",
		DEFAULT_FONT_REGULAR,
		fonts.subtitle_size,
		pcp.config.CARD_CODE_COLOR,
	)
	current_y += pcp.config.CARD_CODE_STEP

	target.draw_text(
		text_x,
		current_y,
		pcp.content.format_price(product.price),
		DEFAULT_FONT_BOLD,
		fonts.title_size + 2.0,
		pcp.config.CARD_PRICE_COLOR,
	)
	current_y += pcp.config.CARD_PRICE_STEP

	max_y = y + height - pcp.config.CARD_BOTTOM_PADDING
	for detail in pcp.content.default_card_details(product, session.viewer):
		if current_y + line_step > max_y:
			break
		for line in wrap_text(detail, DEFAULT_FONT_REGULAR, fonts.body_size, text_width):
			target.draw_text(
				text_x,
				current_y,
				line,
				DEFAULT_FONT_REGULAR,
				fonts.body_size,
				pcp.config.CARD_BODY_COLOR,
			)
			current_y += line_step


#============================================
def draw_text_runs(
	session: RenderSession,
	element: ElementSpec,
	runs: list[TextRun],
	x: float,
	y: float,
	width: float,
	height: float,
) -> None:
	"""
	Draw styled runs inside an element box with padding and alignment.

	Args:
		session: Render session.
		element: Template element.
		runs: Parsed text runs.
		x: Box left edge.
		y: Box top edge.
		width: Box width.
		height: Box height.
	"""
	target = session.target
	regular_font = map_font_name(element.weight)
	bold_font = DEFAULT_FONT_BOLD
	inner_x = x + element.padding
	inner_width = max(MIN_DIMENSION, width - 2.0 * element.padding)
	lines = wrap_runs(runs, inner_width, element.font_size, regular_font, bold_font, target.text_width)

	leading = points_to_mm(element.font_size) * TEXT_LEADING
	first_baseline = y + element.padding + pcp.target.font_ascent(regular_font, element.font_size)
	for index, line in enumerate(lines):
		baseline = first_baseline + index * leading
		if index > 0 and baseline > y + height:
			break
		widths = [
			target.text_width(run.text, bold_font if run.bold else regular_font, element.font_size)
			for run in line
		]
		cursor_x = inner_x + pcp.geometry.compute_align_offset(inner_width, sum(widths), element.text_align)
		for run, run_width in zip(line, widths):
			target.draw_text(
				cursor_x,
				baseline,
				run.text,
				bold_font if run.bold else regular_font,
				element.font_size,
				element.color,
			)
			cursor_x += run_width


#============================================
async def render_element(
	session: RenderSession,
	product: ProductRecord,
	element: ElementSpec,
	x: float,
	y: float,
	width: float,
	height: float,
) -> None:
	"""
	Draw one template element at its absolute rectangle.

	Image elements draw their border as the photo's circle stroke, never as
	a rectangle.

	Args:
		session: Render session.
		product: Product record.
		element: Template element.
		x: Element left edge.
		y: Element top edge.
		width: Element width.
		height: Element height.
	"""
	target = session.target
	with target.transformed(
		opacity=element.opacity,
		rotation=element.rotation,
		center_x=x + width / 2.0,
		center_y=y + height / 2.0,
	):
		if element.background_color:
			target.draw_rect(
				x,
				y,
				width,
				height,
				fill_color=element.background_color,
				radius=element.border_radius,
			)

		if element.content_kind == ContentKind.IMAGE:
			size = min(width - 2.0 * element.padding, height - 2.0 * element.padding)
			stroke_color = element.border_color if element.border_width > 0 else None
			await draw_circular_photo(
				session,
				product.photo_url,
				x + element.padding,
				y + element.padding,
				size,
				stroke_width=element.border_width,
				stroke_color=stroke_color,
			)
			return

		if element.border_width > 0:
			target.draw_rect(
				x,
				y,
				width,
				height,
				stroke_color=element.border_color,
				line_width=element.border_width,
				radius=element.border_radius,
			)

		runs = pcp.content.resolve_runs(product, element, session.viewer)
		if runs:
			draw_text_runs(session, element, runs, x, y, width, height)


#============================================
async def render_template_card(
	session: RenderSession,
	product: ProductRecord,
	x: float,
	y: float,
	width: float,
	height: float,
) -> None:
	"""
	Draw a card from the session's element template.

	The catalog-wide template card style wins over the template's own
	card colors and border width.

	Args:
		session: Render session with a template.
		product: Product record.
		x: Card left edge.
		y: Card top edge.
		width: Card width.
		height: Card height.
	"""
	template = session.template
	card_style = session.settings.template_card
	border_width = template.card_border_width
	if card_style.border_width is not None:
		border_width = card_style.border_width
	session.target.draw_rect(
		x,
		y,
		width,
		height,
		fill_color=card_style.background_color or template.card_background_color,
		stroke_color=card_style.border_color or template.card_border_color,
		line_width=border_width,
		radius=card_style.border_radius,
	)
	visible = [element for element in template.elements if element.visible]
	for element in sorted(visible, key=lambda element: element.z_index):
		element_x, element_y, element_w, element_h = pcp.geometry.map_element_rect(
			element,
			x,
			y,
			width,
			height,
			template.ref_card_width,
			template.ref_card_height,
		)
		await render_element(session, product, element, element_x, element_y, element_w, element_h)


#============================================
async def render_card(
	session: RenderSession,
	product: ProductRecord,
	x: float,
	y: float,
	width: float,
	height: float,
) -> None:
	"""
	Draw one product card with the template or the built-in design.

	Args:
		session: Render session.
		product: Product record.
		x: Card left edge.
		y: Card top edge.
		width: Card width.
		height: Card height.
	"""
	if session.template is not None and session.template.elements:
		await render_template_card(session, product, x, y, width, height)
		return
	await render_default_card(session, product, x, y, width, height)


#============================================
def draw_category_title(session: RenderSession, category_name: str, content_y: float) -> float:
	"""
	Draw a category title with a rule underneath.

	Args:
		session: Render session.
		category_name: Category display name.
		content_y: Top of the title block.

	Returns:
		The content y after the title's bottom margin.
	"""
	target = session.target
	page = session.settings.page
	style = session.settings.title_style
	font_name = map_font_name(style.weight)
	baseline = content_y + pcp.target.font_ascent(font_name, style.font_size)

	alignment = style.alignment.strip().lower()
	if alignment == "left":
		text_x = page.margin_left
	elif alignment == "right":
		text_x = page.width_mm - page.margin_right
	else:
		alignment = "center"
		text_x = page.width_mm / 2.0
	target.draw_text(
		text_x,
		baseline,
		category_name.upper(),
		font_name,
		style.font_size,
		style.color,
		align=alignment,
	)

	rule_y = baseline + pcp.config.TITLE_RULE_OFFSET
	target.draw_line(
		page.margin_left,
		rule_y,
		page.width_mm - page.margin_right,
		rule_y,
		style.color,
		pcp.config.TITLE_RULE_WIDTH,
	)
	return content_y + style.margin_bottom


#============================================
def draw_default_cover_background(session: RenderSession) -> None:
	"""
	Fill the page with the flat cover color and a translucent overlay.

	Args:
		session: Render session.
	"""
	target = session.target
	page = session.settings.page
	target.draw_rect(0.0, 0.0, page.width_mm, page.height_mm, fill_color=pcp.config.COVER_BACKGROUND_FILL)
	with target.transformed(opacity=pcp.config.COVER_OVERLAY_ALPHA):
		target.draw_rect(0.0, 0.0, page.width_mm, page.height_mm, fill_color=pcp.config.COVER_OVERLAY_FILL)


#============================================
def compute_cover_positions(anchor: str, page_height: float) -> tuple[float, float, float]:
	"""
	Compute cover text baselines for an anchor mode.

	Args:
		anchor: "top", "center", or "bottom".
		page_height: Page height.

	Returns:
		Tuple of (title_y, subtitle_y, date_y).
	"""
	normalized = anchor.strip().lower()
	if normalized == "top":
		title_y = page_height * 0.25
		return (title_y, title_y + 20.0, page_height - 20.0)
	if normalized == "bottom":
		title_y = page_height * 0.75
		return (title_y, title_y + 20.0, page_height - 40.0)
	return (page_height / 2.0 - 20.0, page_height / 2.0, page_height - 20.0)


#============================================
async def render_cover(
	session: RenderSession,
	cover: CoverSpec,
	generated_at: datetime.datetime,
) -> None:
	"""
	Draw the cover page on the current page.

	Args:
		session: Render session.
		cover: Cover settings.
		generated_at: Timestamp printed on the cover.
	"""
	target = session.target
	page = session.settings.page
	drew_background = False
	if cover.background_image and session.image_loader is not None:
		try:
			image = await session.image_loader.load(cover.background_image)
		except ImageLoadError as error:
			session.warn(f"Cover background fallback: {error}")
		else:
			pixels_per_mm = pcp.config.COVER_PIXELS_PER_MM
			size = (
				max(1, round(page.width_mm * pixels_per_mm)),
				max(1, round(page.height_mm * pixels_per_mm)),
			)
			fitted = PIL.ImageOps.fit(image.convert("RGB"), size)
			target.draw_image(fitted, 0.0, 0.0, page.width_mm, page.height_mm)
			drew_background = True
	if not drew_background:
		draw_default_cover_background(session)

	title_y, subtitle_y, date_y = compute_cover_positions(cover.anchor, page.height_mm)
	center_x = page.width_mm / 2.0
	target.draw_text(
		center_x,
		title_y,
		cover.title,
		font_pair(cover.title_font)[1],
		cover.title_size,
		cover.title_color,
		align="center",
	)
	target.draw_text(
		center_x,
		subtitle_y,
		cover.subtitle,
		font_pair(cover.subtitle_font)[0],
		cover.subtitle_size,
		cover.subtitle_color,
		align="center",
	)
	date_text = pcp.config.COVER_DATE_PREFIX + generated_at.strftime("%d/%m/%Y")
	target.draw_text(
		center_x,
		date_y,
		date_text,
		font_pair(cover.date_font)[0],
		cover.date_size,
		cover.date_color,
		align="center",
	)
