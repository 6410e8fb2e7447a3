"""
Shared configuration, constants, and settings dataclasses.

All lengths are millimetres measured from the top-left page corner with y
growing downward. Font sizes are points.
"""

# Standard Library
import dataclasses
import enum


POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4

PAPER_SIZES = {
	"A3": (297.0, 420.0),
	"A4": (210.0, 297.0),
	"A5": (148.0, 210.0),
	"LETTER": (216.0, 279.0),
}
DEFAULT_PAPER_SIZE = "A4"
DEFAULT_ORIENTATION = "portrait"

DEFAULT_MARGIN_TOP = 20.0
DEFAULT_MARGIN_BOTTOM = 20.0
DEFAULT_MARGIN_LEFT = 15.0
DEFAULT_MARGIN_RIGHT = 15.0

DEFAULT_ROWS = 4
DEFAULT_COLUMNS = 2
DEFAULT_CARD_SPACING = 5.0
DEFAULT_ROW_SPACING = 10.0
DEFAULT_MAX_CARD_HEIGHT = 80.0
MIN_DIMENSION = 1.0
CATEGORY_GAP = 30.0

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
FONT_FAMILIES = {
	"helvetica": ("Helvetica", "Helvetica-Bold"),
	"arial": ("Helvetica", "Helvetica-Bold"),
	"verdana": ("Helvetica", "Helvetica-Bold"),
	"trebuchet ms": ("Helvetica", "Helvetica-Bold"),
	"impact": ("Helvetica", "Helvetica-Bold"),
	"times": ("Times-Roman", "Times-Bold"),
	"times new roman": ("Times-Roman", "Times-Bold"),
	"georgia": ("Times-Roman", "Times-Bold"),
	"courier": ("Courier", "Courier-Bold"),
	"courier new": ("Courier", "Courier-Bold"),
}
BOLD_WEIGHT = 700
REGULAR_WEIGHT = 400
TEXT_LEADING = 1.2

DEFAULT_TITLE_FONT_SIZE = 22.0
DEFAULT_TITLE_COLOR = "#1e3a8a"
DEFAULT_TITLE_ALIGNMENT = "center"
DEFAULT_TITLE_MARGIN_BOTTOM = 25.0
TITLE_RULE_OFFSET = 2.0
TITLE_RULE_WIDTH = 0.6

DEFAULT_CARD_TITLE_SIZE = 10.0
DEFAULT_CARD_SUBTITLE_SIZE = 8.0
DEFAULT_CARD_BODY_SIZE = 7.0
DEFAULT_CARD_BACKGROUND = "#ffffff"
DEFAULT_CARD_BORDER_COLOR = "#e5e7eb"
DEFAULT_CARD_BORDER_WIDTH = 0.5

# default card internals
CARD_PHOTO_MARGIN = 4.0
CARD_TEXT_GAP = 6.0
CARD_TEXT_TOP = 10.0
CARD_LINE_STEP = 6.0
CARD_CODE_STEP = 8.0
CARD_PRICE_STEP = 10.0
CARD_BOTTOM_PADDING = 4.0
CARD_CODE_COLOR = "#646464"
CARD_PRICE_COLOR = "#008000"
CARD_BODY_COLOR = "#3c3c3c"
CARD_NAME_COLOR = "#000000"

DEFAULT_REF_CARD_WIDTH = 300.0
DEFAULT_REF_CARD_HEIGHT = 200.0
PREVIEW_SCALE = 0.75
PREVIEW_MARGIN = 20.0

PLACEHOLDER_LINES = ("SEM", "FOTO")
PLACEHOLDER_FILL = "#f5f5f5"
PLACEHOLDER_STROKE = "#c8c8c8"
PLACEHOLDER_TEXT_COLOR = "#969696"
PLACEHOLDER_TEXT_SIZE = 7.0
PLACEHOLDER_STROKE_WIDTH = 0.5

IMAGE_PIXELS_PER_MM = 12.0
COVER_PIXELS_PER_MM = 6.0
CIRCLE_INSET_MM = 1.0
MASK_SUPERSAMPLE = 4
IMAGE_FETCH_TIMEOUT = 30.0

DEFAULT_COVER_TITLE = "CATÁLOGO DE PRODUTOS"
DEFAULT_COVER_SUBTITLE = "Sistema de Gestão"
DEFAULT_COVER_ANCHOR = "center"
DEFAULT_COVER_TITLE_SIZE = 32.0
DEFAULT_COVER_TITLE_COLOR = "#1e3a8a"
DEFAULT_COVER_SUBTITLE_SIZE = 16.0
DEFAULT_COVER_SUBTITLE_COLOR = "#475569"
DEFAULT_COVER_DATE_SIZE = 12.0
DEFAULT_COVER_DATE_COLOR = "#64748b"
COVER_BACKGROUND_FILL = "#f0f8ff"
COVER_OVERLAY_FILL = "#3b82f6"
COVER_OVERLAY_ALPHA = 0.1
COVER_DATE_PREFIX = "Gerado em: "

NO_CATEGORY_LABEL = "Sem Categoria"
DEFAULT_STOCK_UNIT = "Un"

OUTPUT_PREFIX_CATALOG = "catalogo-produtos"
OUTPUT_PREFIX_MULTI = "catalogo-multiplos-templates"
OUTPUT_PREFIX_PREVIEW = "preview-catalogo"

PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10

KEY_CATALOG_CONFIGURATION = "catalog-configuration"
KEY_CATALOG_LAYOUT = "catalog-layout"
KEY_CATALOG_TEMPLATES = "catalog-templates"
KEY_CATEGORY_TEMPLATES = "catalog-category-templates"


class ContentKind(enum.Enum):
	TEXT = "text"
	IMAGE = "image"


class ContentBinding(enum.Enum):
	NAME = "product-name"
	INTERNAL_CODE = "internal-code"
	CATEGORY = "category"
	PRICE = "price"
	STOCK = "stock"
	UNIT = "unit"
	SIZE = "size"
	COLOR = "color"
	COMPOSITION = "composition"
	WIDTH = "width"
	LENGTH = "length"
	THICKNESS = "thickness"
	DIAMETER = "diameter"
	OBSERVATIONS = "observations"
	PHOTO = "photo"
	LABEL = "label"


class ViewerClass(enum.Enum):
	ADMIN = "admin"
	MANAGER = "manager"
	SELLER_INTERNAL = "seller_internal"
	SELLER_EXTERNAL = "seller_external"
	CLIENT = "client"
	PUBLIC = "public"


RESTRICTED_VIEWERS = frozenset({
	ViewerClass.PUBLIC,
	ViewerClass.CLIENT,
	ViewerClass.SELLER_EXTERNAL,
})


@dataclasses.dataclass(frozen=True)
class PageSpec:
	width_mm: float = PAPER_SIZES[DEFAULT_PAPER_SIZE][0]
	height_mm: float = PAPER_SIZES[DEFAULT_PAPER_SIZE][1]
	margin_top: float = DEFAULT_MARGIN_TOP
	margin_bottom: float = DEFAULT_MARGIN_BOTTOM
	margin_left: float = DEFAULT_MARGIN_LEFT
	margin_right: float = DEFAULT_MARGIN_RIGHT

	@property
	def printable_bottom(self) -> float:
		return self.height_mm - self.margin_bottom


@dataclasses.dataclass(frozen=True)
class GridSpec:
	rows: int = DEFAULT_ROWS
	columns: int = DEFAULT_COLUMNS
	card_spacing: float = DEFAULT_CARD_SPACING
	row_spacing: float = DEFAULT_ROW_SPACING
	max_card_height: float | None = DEFAULT_MAX_CARD_HEIGHT

	@property
	def capacity(self) -> int:
		return self.rows * self.columns


@dataclasses.dataclass(frozen=True)
class CategoryTitleStyle:
	font_size: float = DEFAULT_TITLE_FONT_SIZE
	color: str = DEFAULT_TITLE_COLOR
	weight: int = BOLD_WEIGHT
	alignment: str = DEFAULT_TITLE_ALIGNMENT
	margin_bottom: float = DEFAULT_TITLE_MARGIN_BOTTOM


@dataclasses.dataclass(frozen=True)
class CardFonts:
	title_size: float = DEFAULT_CARD_TITLE_SIZE
	subtitle_size: float = DEFAULT_CARD_SUBTITLE_SIZE
	body_size: float = DEFAULT_CARD_BODY_SIZE


@dataclasses.dataclass(frozen=True)
class CardStyle:
	background_color: str = DEFAULT_CARD_BACKGROUND
	border_color: str = DEFAULT_CARD_BORDER_COLOR
	border_width: float = DEFAULT_CARD_BORDER_WIDTH


@dataclasses.dataclass(frozen=True)
class TemplateCardStyle:
	"""
	Catalog-wide card style applied over a template's own card style.

	None keeps the template's value.
	"""

	background_color: str | None = None
	border_color: str | None = None
	border_width: float | None = None
	border_radius: float = 0.0


@dataclasses.dataclass(frozen=True)
class CoverSpec:
	enabled: bool = True
	background_image: str | None = None
	title: str = DEFAULT_COVER_TITLE
	subtitle: str = DEFAULT_COVER_SUBTITLE
	anchor: str = DEFAULT_COVER_ANCHOR
	title_font: str = DEFAULT_FONT_REGULAR
	title_size: float = DEFAULT_COVER_TITLE_SIZE
	title_color: str = DEFAULT_COVER_TITLE_COLOR
	subtitle_font: str = DEFAULT_FONT_REGULAR
	subtitle_size: float = DEFAULT_COVER_SUBTITLE_SIZE
	subtitle_color: str = DEFAULT_COVER_SUBTITLE_COLOR
	date_font: str = DEFAULT_FONT_REGULAR
	date_size: float = DEFAULT_COVER_DATE_SIZE
	date_color: str = DEFAULT_COVER_DATE_COLOR


@dataclasses.dataclass(frozen=True)
class ElementSpec:
	id: str
	label: str = ""
	content_kind: ContentKind = ContentKind.TEXT
	binding: ContentBinding = ContentBinding.LABEL
	ref_x: float = 0.0
	ref_y: float = 0.0
	ref_w: float = 0.0
	ref_h: float = 0.0
	font_size: float = 12.0
	weight: int = REGULAR_WEIGHT
	color: str = "#000000"
	background_color: str | None = None
	border_width: float = 0.0
	border_color: str = "#000000"
	border_radius: float = 0.0
	padding: float = 0.0
	text_align: str = "left"
	opacity: float = 1.0
	rotation: float = 0.0
	z_index: int = 0
	visible: bool = True


@dataclasses.dataclass(frozen=True)
class LayoutTemplate:
	elements: tuple[ElementSpec, ...] = ()
	ref_card_width: float = DEFAULT_REF_CARD_WIDTH
	ref_card_height: float = DEFAULT_REF_CARD_HEIGHT
	card_background_color: str = DEFAULT_CARD_BACKGROUND
	card_border_color: str = DEFAULT_CARD_BORDER_COLOR
	card_border_width: float = DEFAULT_CARD_BORDER_WIDTH


@dataclasses.dataclass(frozen=True)
class SettingsOverride:
	"""
	Sections a saved template replaces for its own categories.

	A None section keeps the catalog-wide value.
	"""

	page: PageSpec | None = None
	grid: GridSpec | None = None
	template_card: TemplateCardStyle | None = None
	title_style: CategoryTitleStyle | None = None


@dataclasses.dataclass(frozen=True)
class NamedTemplate:
	template_id: str
	name: str
	layout: LayoutTemplate
	description: str = ""
	settings_override: SettingsOverride | None = None


@dataclasses.dataclass(frozen=True)
class CatalogSettings:
	page: PageSpec = dataclasses.field(default_factory=PageSpec)
	grid: GridSpec = dataclasses.field(default_factory=GridSpec)
	title_style: CategoryTitleStyle = dataclasses.field(default_factory=CategoryTitleStyle)
	cover: CoverSpec = dataclasses.field(default_factory=CoverSpec)
	card_style: CardStyle = dataclasses.field(default_factory=CardStyle)
	template_card: TemplateCardStyle = dataclasses.field(default_factory=TemplateCardStyle)
	fonts: CardFonts = dataclasses.field(default_factory=CardFonts)

	def with_override(self, override: SettingsOverride | None) -> "CatalogSettings":
		"""
		Return settings with a template's sections swapped in.

		The page size stays fixed for the whole document; only the
		override's margins apply.
		"""
		if override is None:
			return self
		changes = {}
		if override.page is not None:
			changes["page"] = dataclasses.replace(
				override.page,
				width_mm=self.page.width_mm,
				height_mm=self.page.height_mm,
			)
		if override.grid is not None:
			changes["grid"] = override.grid
		if override.template_card is not None:
			changes["template_card"] = override.template_card
		if override.title_style is not None:
			changes["title_style"] = override.title_style
		if not changes:
			return self
		return dataclasses.replace(self, **changes)


#============================================
def points_to_mm(value: float) -> float:
	"""
	Convert points to millimetres.

	Args:
		value: Points value.

	Returns:
		Millimetres value.
	"""
	return value * MM_PER_INCH / POINTS_PER_INCH


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimetres to points.

	Args:
		value: Millimetres value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH / MM_PER_INCH
