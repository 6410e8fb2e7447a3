"""
Card content resolution and inline bold markup.
"""

# Standard Library
import dataclasses
import re

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config
import product_catalog_pdf.products


ContentBinding = pcp.config.ContentBinding
ElementSpec = pcp.config.ElementSpec
ViewerClass = pcp.config.ViewerClass
ProductRecord = pcp.products.ProductRecord

RESTRICTED_VIEWERS = pcp.config.RESTRICTED_VIEWERS
NO_CATEGORY_LABEL = pcp.config.NO_CATEGORY_LABEL
DEFAULT_STOCK_UNIT = pcp.config.DEFAULT_STOCK_UNIT

BOLD_PATTERN = re.compile(r"(\*\*.*?\*\*)")
TIMESTAMP_SUFFIX = re.compile(r"-\d+$")


@dataclasses.dataclass(frozen=True)
class TextRun:
	text: str
	bold: bool = False


#============================================
def binding_for_element_id(element_id: str) -> ContentBinding:
	"""
	Resolve the content binding for a template element id.

	Designer ids carry a creation timestamp suffix ("price-1712345678");
	the suffix is dropped before matching. Unknown ids bind to the
	element's static label.

	Args:
		element_id: Element identifier.

	Returns:
		ContentBinding member.
	"""
	base_id = TIMESTAMP_SUFFIX.sub("", element_id.strip())
	for binding in ContentBinding:
		if binding.value == base_id:
			return binding
	return ContentBinding.LABEL


#============================================
def parse_markup(text: str) -> list[TextRun]:
	"""
	Split text into plain and bold runs.

	Segments wrapped in double asterisks become bold runs. An unmatched
	marker is kept as literal text.

	Args:
		text: Text with optional **bold** segments.

	Returns:
		Ordered list of TextRun entries, without empty runs.
	"""
	runs: list[TextRun] = []
	for part in BOLD_PATTERN.split(text):
		if not part:
			continue
		if len(part) >= 4 and part.startswith("**") and part.endswith("**"):
			inner = part[2:-2]
			if inner:
				runs.append(TextRun(inner, bold=True))
			continue
		runs.append(TextRun(part, bold=False))
	return runs


#============================================
def runs_to_plain(runs: list[TextRun]) -> str:
	"""
	Join runs back into plain text.

	Args:
		runs: Text runs.

	Returns:
		Concatenated text.
	"""
	return "".join(run.text for run in runs)


#============================================
def format_number(value: float) -> str:
	"""
	Format a measurement without trailing zeros.

	Args:
		value: Numeric value.

	Returns:
		Compact string such as "12" or "2.5".
	"""
	return f"{value:g}"


#============================================
def format_price(value: float) -> str:
	"""
	Format a price in Brazilian reais.

	Args:
		value: Price value.

	Returns:
		String such as "R$ 1.234,56".
	"""
	sign = "-" if value < 0 else ""
	grouped = f"{abs(value):,.2f}"
	swapped = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
	return f"{sign}R$ {swapped}"


#============================================
def can_view_stock(viewer: ViewerClass) -> bool:
	"""
	Check whether a viewer class may see stock quantities.

	Args:
		viewer: Viewer class.

	Returns:
		True unless the viewer is restricted.
	"""
	return viewer not in RESTRICTED_VIEWERS


#============================================
def resolve_content(
	product: ProductRecord,
	element: ElementSpec,
	viewer: ViewerClass,
) -> str:
	"""
	Resolve the text bound to a template element for one product.

	Absent optional fields resolve to an empty string, and stock is
	suppressed for restricted viewers.

	Args:
		product: Product record.
		element: Template element.
		viewer: Viewer class for capability gating.

	Returns:
		Text with optional **bold** markup.
	"""
	binding = element.binding
	if binding == ContentBinding.NAME:
		return product.name
	if binding == ContentBinding.INTERNAL_CODE:
		return f"**Cod.:** {product.internal_code}"
	if binding == ContentBinding.CATEGORY:
		return product.category_name or NO_CATEGORY_LABEL
	if binding == ContentBinding.PRICE:
		return format_price(product.price)
	if binding == ContentBinding.STOCK:
		if not can_view_stock(viewer) or product.stock is None:
			return ""
		return f"**Estoque:** {format_number(product.stock)}"
	if binding == ContentBinding.UNIT:
		return f"**Unidade:** {product.stock_unit or DEFAULT_STOCK_UNIT}"
	if binding == ContentBinding.SIZE:
		return f"**Tamanho:** {product.size}" if product.size else ""
	if binding == ContentBinding.COLOR:
		return f"**Cor:** {product.color}" if product.color else ""
	if binding == ContentBinding.COMPOSITION:
		return f"**Composição:** {product.composition}" if product.composition else ""
	if binding == ContentBinding.WIDTH:
		return f"**Largura:** {format_number(product.width)}cm" if product.width else ""
	if binding == ContentBinding.LENGTH:
		return f"**Comprimento:** {format_number(product.length)}cm" if product.length else ""
	if binding == ContentBinding.THICKNESS:
		return f"**Espessura:** {format_number(product.thickness)}mm" if product.thickness else ""
	if binding == ContentBinding.DIAMETER:
		return f"**Diâmetro:** {format_number(product.diameter)}cm" if product.diameter else ""
	if binding == ContentBinding.OBSERVATIONS:
		return f"**Observações:** {product.observation}" if product.observation else ""
	if binding == ContentBinding.PHOTO:
		return ""
	return element.label


#============================================
def resolve_runs(
	product: ProductRecord,
	element: ElementSpec,
	viewer: ViewerClass,
) -> list[TextRun]:
	"""
	Resolve element content and parse it into runs.

	Args:
		product: Product record.
		element: Template element.
		viewer: Viewer class.

	Returns:
		Text runs, empty when nothing should be drawn.
	"""
	return parse_markup(resolve_content(product, element, viewer))


#============================================
def default_card_details(product: ProductRecord, viewer: ViewerClass) -> list[str]:
	"""
	List the descriptive lines of the built-in card.

	Only present attributes produce a line.

	Args:
		product: Product record.
		viewer: Viewer class.

	Returns:
		Detail lines in display order.
	"""
	details: list[str] = []
	if product.stock is not None and can_view_stock(viewer):
		unit = f" {product.stock_unit}" if product.stock_unit else ""
		details.append(f"Estoque: {format_number(product.stock)}{unit}")
	if product.category_name:
		details.append(f"Categoria: {product.category_name}")
	if product.barcode:
		details.append(f"Código de Barras: {product.barcode}")
	if product.size:
		details.append(f"Tamanho: {product.size}")
	if product.color:
		details.append(f"Cor: {product.color}")
	if product.composition:
		details.append(f"Composição: {product.composition}")

	dimensions: list[str] = []
	if product.width:
		dimensions.append(f"L:{format_number(product.width)}")
	if product.length:
		dimensions.append(f"C:{format_number(product.length)}")
	if product.thickness:
		dimensions.append(f"E:{format_number(product.thickness)}")
	if product.diameter:
		dimensions.append(f"D:{format_number(product.diameter)}")
	if dimensions:
		details.append("Dimensões: " + " x ".join(dimensions))

	if product.box:
		details.append(f"Embalagem: {product.box}")
	if product.observation:
		details.append(f"Obs: {product.observation}")
	return details
