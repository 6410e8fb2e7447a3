"""
Configuration store access and typed settings loading.

The store holds camelCase JSON blobs as saved by the catalog designer.
Each blob is optional; missing or malformed blobs fall back to defaults.
"""

# Standard Library
import json
import math
import pathlib

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config
import product_catalog_pdf.content
import product_catalog_pdf.geometry


CardFonts = pcp.config.CardFonts
CardStyle = pcp.config.CardStyle
CatalogSettings = pcp.config.CatalogSettings
CategoryTitleStyle = pcp.config.CategoryTitleStyle
ContentKind = pcp.config.ContentKind
CoverSpec = pcp.config.CoverSpec
ElementSpec = pcp.config.ElementSpec
GridSpec = pcp.config.GridSpec
LayoutTemplate = pcp.config.LayoutTemplate
NamedTemplate = pcp.config.NamedTemplate
PageSpec = pcp.config.PageSpec
SettingsOverride = pcp.config.SettingsOverride
TemplateCardStyle = pcp.config.TemplateCardStyle

BOLD_WEIGHT = pcp.config.BOLD_WEIGHT
REGULAR_WEIGHT = pcp.config.REGULAR_WEIGHT
KEY_CATALOG_CONFIGURATION = pcp.config.KEY_CATALOG_CONFIGURATION
KEY_CATALOG_LAYOUT = pcp.config.KEY_CATALOG_LAYOUT
KEY_CATALOG_TEMPLATES = pcp.config.KEY_CATALOG_TEMPLATES
KEY_CATEGORY_TEMPLATES = pcp.config.KEY_CATEGORY_TEMPLATES
ALIGNMENTS = ("left", "center", "right")
ANCHORS = ("top", "center", "bottom")
FALSE_STRINGS = ("false", "0", "no", "off", "")


class ConfigStore:
	"""
	Key-value lookup for persisted configuration blobs.
	"""

	def get(self, key: str):
		raise NotImplementedError


class MemoryConfigStore(ConfigStore):
	"""
	Store backed by an in-memory dict.
	"""

	def __init__(self, values: dict | None = None):
		self.values = dict(values or {})

	def get(self, key: str):
		return self.values.get(key)


class JsonConfigStore(ConfigStore):
	"""
	Store backed by one JSON file holding an object of keys.
	"""

	def __init__(self, path: str | pathlib.Path):
		self.path = pathlib.Path(path)
		self._values: dict | None = None

	def _load(self) -> dict:
		if self._values is not None:
			return self._values
		self._values = {}
		if not self.path.exists():
			print(f"Config file not found, using defaults: {self.path}")
			return self._values
		try:
			with self.path.open("r", encoding="utf-8") as handle:
				data = json.load(handle)
		except json.JSONDecodeError as error:
			print(f"Config file is not valid JSON, using defaults: {self.path} ({error})")
			return self._values
		if not isinstance(data, dict):
			print(f"Config file must hold a JSON object, using defaults: {self.path}")
			return self._values
		self._values = data
		return self._values

	def get(self, key: str):
		return self._load().get(key)


#============================================
def read_blob(store: ConfigStore | None, key: str, expected: type):
	"""
	Read and decode one store value.

	Values may be JSON strings or already decoded objects.

	Args:
		store: Configuration store, or None.
		key: Store key.
		expected: Expected decoded type (dict or list).

	Returns:
		Decoded value, or None when missing or malformed.
	"""
	if store is None:
		return None
	raw = store.get(key)
	if raw is None:
		return None
	if isinstance(raw, (str, bytes)):
		try:
			raw = json.loads(raw)
		except json.JSONDecodeError as error:
			print(f"Malformed '{key}' configuration, using defaults ({error})")
			return None
	if not isinstance(raw, expected):
		print(f"Unexpected '{key}' configuration shape, using defaults")
		return None
	return raw


#============================================
def _section(data: dict | None, key: str) -> dict:
	"""
	Return one section of a blob as a dict.

	Args:
		data: Decoded blob, or None.
		key: Section key.

	Returns:
		The section, or an empty dict when missing or not an object.
	"""
	if not data:
		return {}
	value = data.get(key)
	if isinstance(value, dict):
		return value
	return {}


#============================================
def _as_float(value, default: float | None) -> float | None:
	"""
	Read a finite number.

	Args:
		value: Raw field value (number or numeric string).
		default: Returned for missing, non-numeric, NaN or infinite values.

	Returns:
		Float value or default.
	"""
	if value is None or isinstance(value, bool):
		return default
	try:
		number = float(value)
	except (TypeError, ValueError):
		return default
	if not math.isfinite(number):
		return default
	return number


#============================================
def _as_int(value, default: int) -> int:
	"""
	Read a finite number truncated to int.

	Args:
		value: Raw field value.
		default: Fallback value.

	Returns:
		Int value or default.
	"""
	number = _as_float(value, None)
	if number is None:
		return default
	return int(number)


#============================================
def _as_bool(value, default: bool) -> bool:
	"""
	Read a flag stored as a bool, number, or string.

	Args:
		value: Raw field value.
		default: Returned when the value is missing.

	Returns:
		Boolean flag.
	"""
	if value is None:
		return default
	if isinstance(value, str):
		return value.strip().lower() not in FALSE_STRINGS
	return bool(value)


#============================================
def _as_text(value, default: str) -> str:
	"""
	Read a non-blank string.

	Args:
		value: Raw field value.
		default: Fallback text.

	Returns:
		The string or default.
	"""
	if isinstance(value, str) and value.strip():
		return value
	return default


#============================================
def _as_color(value, default: str | None) -> str | None:
	"""
	Read a color string.

	Args:
		value: Raw field value.
		default: Returned for non-string values.

	Returns:
		The color, None for "transparent" or blank, or default.
	"""
	if not isinstance(value, str):
		return default
	text = value.strip()
	if not text or text.lower() == "transparent":
		return None
	return text


#============================================
def _as_choice(value, choices: tuple[str, ...], default: str) -> str:
	"""
	Read a lowercase keyword from a fixed set.

	Args:
		value: Raw field value.
		choices: Allowed keywords.
		default: Fallback keyword.

	Returns:
		Matched keyword or default.
	"""
	if isinstance(value, str) and value.strip().lower() in choices:
		return value.strip().lower()
	return default


#============================================
def parse_weight(value, default: int = REGULAR_WEIGHT) -> int:
	"""
	Parse a CSS-like font weight.

	Args:
		value: "bold", "normal", a numeric string, or a number.
		default: Fallback weight.

	Returns:
		Numeric weight.
	"""
	if isinstance(value, str):
		normalized = value.strip().lower()
		if normalized in ("bold", "bolder"):
			return BOLD_WEIGHT
		if normalized in ("normal", "lighter", ""):
			return REGULAR_WEIGHT
	return _as_int(value, default)


#============================================
def parse_opacity(value) -> float:
	"""
	Parse an opacity given as 0-1 or as a 0-100 percentage.
	"""
	opacity = _as_float(value, 1.0)
	if opacity > 1.0:
		opacity = opacity / 100.0
	return max(0.0, min(1.0, opacity))


#============================================
def parse_page_spec(page: dict) -> PageSpec:
	"""
	Build a PageSpec from the "page" section.

	Args:
		page: Page section dict.

	Returns:
		PageSpec with non-negative margins.
	"""
	defaults = PageSpec()
	width, height = pcp.geometry.resolve_page_size(
		_as_text(page.get("paperSize"), pcp.config.DEFAULT_PAPER_SIZE),
		_as_text(page.get("orientation"), pcp.config.DEFAULT_ORIENTATION),
		_as_float(page.get("customWidth"), None),
		_as_float(page.get("customHeight"), None),
	)
	return PageSpec(
		width_mm=width,
		height_mm=height,
		margin_top=max(0.0, _as_float(page.get("marginTop"), defaults.margin_top)),
		margin_bottom=max(0.0, _as_float(page.get("marginBottom"), defaults.margin_bottom)),
		margin_left=max(0.0, _as_float(page.get("marginLeft"), defaults.margin_left)),
		margin_right=max(0.0, _as_float(page.get("marginRight"), defaults.margin_right)),
	)


#============================================
def parse_grid_spec(layout: dict) -> GridSpec:
	"""
	Build a GridSpec from the "layout" section.

	Args:
		layout: Layout section dict.

	Returns:
		GridSpec with at least one row and column.
	"""
	defaults = GridSpec()
	max_card_height = defaults.max_card_height
	if "maxCardHeight" in layout:
		# null removes the cap
		raw = layout.get("maxCardHeight")
		max_card_height = None if raw is None else _as_float(raw, defaults.max_card_height)
	return GridSpec(
		rows=max(1, _as_int(layout.get("rows"), defaults.rows)),
		columns=max(1, _as_int(layout.get("columns"), defaults.columns)),
		card_spacing=max(0.0, _as_float(layout.get("cardSpacing"), defaults.card_spacing)),
		row_spacing=max(0.0, _as_float(layout.get("rowSpacing"), defaults.row_spacing)),
		max_card_height=max_card_height,
	)


#============================================
def parse_title_style(title: dict) -> CategoryTitleStyle:
	"""
	Build the category title style from the "categoryTitle" section.
	"""
	defaults = CategoryTitleStyle()
	return CategoryTitleStyle(
		font_size=_as_float(title.get("fontSize"), defaults.font_size),
		color=_as_color(title.get("fontColor"), defaults.color) or defaults.color,
		weight=parse_weight(title.get("fontWeight"), defaults.weight),
		alignment=_as_choice(title.get("alignment"), ALIGNMENTS, defaults.alignment),
		margin_bottom=max(0.0, _as_float(title.get("marginBottom"), defaults.margin_bottom)),
	)


#============================================
def parse_card_style(styles: dict) -> CardStyle:
	"""
	Build the built-in card style from the "styles" section.

	Args:
		styles: Styles section dict.

	Returns:
		CardStyle.
	"""
	defaults = CardStyle()
	return CardStyle(
		background_color=_as_color(styles.get("cardBackgroundColor"), defaults.background_color)
		or defaults.background_color,
		border_color=_as_color(styles.get("cardBorderColor"), defaults.border_color)
		or defaults.border_color,
		border_width=max(0.0, _as_float(styles.get("cardBorderWidth"), defaults.border_width)),
	)


#============================================
def parse_template_card_style(layout: dict) -> TemplateCardStyle:
	"""
	Build the catalog-wide template card style from the "layout" section.

	Missing keys stay None so the template's own value is used.

	Args:
		layout: Layout section dict.

	Returns:
		TemplateCardStyle.
	"""
	border_width = _as_float(layout.get("cardBorderWidth"), None)
	if border_width is not None:
		border_width = max(0.0, border_width)
	return TemplateCardStyle(
		background_color=_as_color(layout.get("cardBackgroundColor"), None),
		border_color=_as_color(layout.get("cardBorderColor"), None),
		border_width=border_width,
		border_radius=max(0.0, _as_float(layout.get("cardBorderRadius"), 0.0)),
	)


#============================================
def parse_card_fonts(fonts: dict) -> CardFonts:
	"""
	Build the built-in card font sizes from the "fonts" section.
	"""
	defaults = CardFonts()
	return CardFonts(
		title_size=_as_float(fonts.get("titleSize"), defaults.title_size),
		subtitle_size=_as_float(fonts.get("subtitleSize"), defaults.subtitle_size),
		body_size=_as_float(fonts.get("bodySize"), defaults.body_size),
	)


#============================================
def parse_cover_spec(cover: dict) -> CoverSpec:
	"""
	Build a CoverSpec from the "cover" section.

	Args:
		cover: Cover section dict.

	Returns:
		CoverSpec.
	"""
	defaults = CoverSpec()
	background = cover.get("backgroundImage")
	if not isinstance(background, str) or not background.strip():
		background = None
	enabled = cover.get("enabled")
	return CoverSpec(
		enabled=_as_bool(enabled, defaults.enabled),
		background_image=background,
		title=_as_text(cover.get("title"), defaults.title),
		subtitle=_as_text(cover.get("subtitle"), defaults.subtitle),
		anchor=_as_choice(cover.get("titlePosition"), ANCHORS, defaults.anchor),
		title_font=_as_text(cover.get("titleFont"), defaults.title_font),
		title_size=_as_float(cover.get("titleSize"), defaults.title_size),
		title_color=_as_color(cover.get("titleColor"), defaults.title_color) or defaults.title_color,
		subtitle_font=_as_text(cover.get("subtitleFont"), defaults.subtitle_font),
		subtitle_size=_as_float(cover.get("subtitleSize"), defaults.subtitle_size),
		subtitle_color=_as_color(cover.get("subtitleColor"), defaults.subtitle_color)
		or defaults.subtitle_color,
		date_font=_as_text(cover.get("dateFont"), defaults.date_font),
		date_size=_as_float(cover.get("dateSize"), defaults.date_size),
		date_color=_as_color(cover.get("dateColor"), defaults.date_color) or defaults.date_color,
	)


#============================================
def parse_catalog_settings(data: dict | None) -> CatalogSettings:
	"""
	Build CatalogSettings from a decoded "catalog-configuration" blob.

	Args:
		data: Decoded blob, or None for defaults.

	Returns:
		CatalogSettings.
	"""
	layout = _section(data, "layout")
	return CatalogSettings(
		page=parse_page_spec(_section(data, "page")),
		grid=parse_grid_spec(layout),
		title_style=parse_title_style(_section(data, "categoryTitle")),
		cover=parse_cover_spec(_section(data, "cover")),
		card_style=parse_card_style(_section(data, "styles")),
		template_card=parse_template_card_style(layout),
		fonts=parse_card_fonts(_section(data, "fonts")),
	)


#============================================
def parse_settings_override(data) -> SettingsOverride | None:
	"""
	Build the per-template override from a saved "catalogConfig" block.

	Only sections present in the block replace the catalog-wide ones.

	Args:
		data: Decoded block, or anything else for no override.

	Returns:
		SettingsOverride, or None when the block sets no section.
	"""
	if not isinstance(data, dict):
		return None
	page = None
	if isinstance(data.get("page"), dict):
		page = parse_page_spec(data["page"])
	grid = None
	template_card = None
	if isinstance(data.get("layout"), dict):
		grid = parse_grid_spec(data["layout"])
		template_card = parse_template_card_style(data["layout"])
	title_style = None
	if isinstance(data.get("categoryTitle"), dict):
		title_style = parse_title_style(data["categoryTitle"])
	if page is None and grid is None and title_style is None:
		return None
	return SettingsOverride(
		page=page,
		grid=grid,
		template_card=template_card,
		title_style=title_style,
	)


#============================================
def parse_element(data: dict) -> ElementSpec | None:
	"""
	Build an ElementSpec from a designer element.

	The content binding is resolved here from the element id.

	Args:
		data: Element dict.

	Returns:
		ElementSpec, or None when the element has no id.
	"""
	element_id = data.get("id")
	if not isinstance(element_id, str) or not element_id.strip():
		return None
	binding = pcp.content.binding_for_element_id(element_id)
	content_kind = ContentKind.TEXT
	if data.get("type") == "image":
		content_kind = ContentKind.IMAGE
	defaults = ElementSpec(id=element_id)
	return ElementSpec(
		id=element_id,
		label=data.get("label") if isinstance(data.get("label"), str) else "",
		content_kind=content_kind,
		binding=binding,
		ref_x=_as_float(data.get("x"), 0.0),
		ref_y=_as_float(data.get("y"), 0.0),
		ref_w=max(0.0, _as_float(data.get("width"), 0.0)),
		ref_h=max(0.0, _as_float(data.get("height"), 0.0)),
		font_size=_as_float(data.get("fontSize"), defaults.font_size),
		weight=parse_weight(data.get("fontWeight"), defaults.weight),
		color=_as_color(data.get("color"), defaults.color) or defaults.color,
		background_color=_as_color(data.get("backgroundColor"), None),
		border_width=max(0.0, _as_float(data.get("borderWidth"), 0.0)),
		border_color=_as_color(data.get("borderColor"), defaults.border_color) or defaults.border_color,
		border_radius=max(0.0, _as_float(data.get("borderRadius"), 0.0)),
		padding=max(0.0, _as_float(data.get("padding"), 0.0)),
		text_align=_as_choice(data.get("textAlign"), ALIGNMENTS, defaults.text_align),
		opacity=parse_opacity(data.get("opacity")),
		rotation=_as_float(data.get("rotation"), 0.0),
		z_index=_as_int(data.get("zIndex"), 0),
		visible=_as_bool(data.get("visible"), True),
	)


#============================================
def parse_layout_template(data: dict) -> LayoutTemplate:
	"""
	Build a LayoutTemplate from a designer layout blob.

	Args:
		data: Layout dict with "elements" and card-level fields.

	Returns:
		LayoutTemplate.
	"""
	defaults = LayoutTemplate()
	elements = []
	for item in data.get("elements") or []:
		if not isinstance(item, dict):
			continue
		element = parse_element(item)
		if element is not None:
			elements.append(element)
	return LayoutTemplate(
		elements=tuple(elements),
		ref_card_width=_as_float(data.get("cardWidth"), defaults.ref_card_width),
		ref_card_height=_as_float(data.get("cardHeight"), defaults.ref_card_height),
		card_background_color=_as_color(data.get("backgroundColor"), defaults.card_background_color)
		or defaults.card_background_color,
		card_border_color=_as_color(data.get("borderColor"), defaults.card_border_color)
		or defaults.card_border_color,
		card_border_width=max(0.0, _as_float(data.get("borderWidth"), defaults.card_border_width)),
	)


#============================================
def load_catalog_settings(store: ConfigStore | None) -> CatalogSettings:
	"""
	Load the catalog-wide settings.

	Args:
		store: Configuration store, or None for defaults.

	Returns:
		CatalogSettings.
	"""
	data = read_blob(store, KEY_CATALOG_CONFIGURATION, dict)
	return parse_catalog_settings(data)


#============================================
def load_layout_template(store: ConfigStore | None) -> LayoutTemplate | None:
	"""
	Load the single designer template.

	Args:
		store: Configuration store.

	Returns:
		LayoutTemplate, or None when none is saved.
	"""
	data = read_blob(store, KEY_CATALOG_LAYOUT, dict)
	if data is None:
		return None
	return parse_layout_template(data)


#============================================
def load_named_templates(store: ConfigStore | None) -> dict[str, NamedTemplate]:
	"""
	Load the registry of saved named templates.

	Each saved entry carries its card layout under "layoutConfig"; an
	entry without one falls back to elements stored at its top level.
	Page, layout and category title sections saved under "catalogConfig"
	become the template's settings override.

	Args:
		store: Configuration store.

	Returns:
		Dict of template id to NamedTemplate.
	"""
	data = read_blob(store, KEY_CATALOG_TEMPLATES, list)
	registry: dict[str, NamedTemplate] = {}
	for item in data or []:
		if not isinstance(item, dict):
			continue
		template_id = item.get("id")
		if not isinstance(template_id, str) or not template_id:
			continue
		layout_data = item.get("layoutConfig")
		if not isinstance(layout_data, dict):
			layout_data = item
		elif not layout_data.get("elements") and item.get("elements"):
			layout_data = dict(layout_data, elements=item.get("elements"))
		registry[template_id] = NamedTemplate(
			template_id=template_id,
			name=_as_text(item.get("name"), template_id),
			layout=parse_layout_template(layout_data),
			description=item.get("description") if isinstance(item.get("description"), str) else "",
			settings_override=parse_settings_override(item.get("catalogConfig")),
		)
	return registry


#============================================
def load_category_templates(store: ConfigStore | None) -> dict[str, str]:
	"""
	Load the category name to template id map, dropping empty ids.
	"""
	data = read_blob(store, KEY_CATEGORY_TEMPLATES, dict)
	mapping: dict[str, str] = {}
	for category_name, template_id in (data or {}).items():
		if isinstance(template_id, str) and template_id:
			mapping[str(category_name)] = template_id
	return mapping
