"""
Product records and category grouping.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config


NO_CATEGORY_LABEL = pcp.config.NO_CATEGORY_LABEL


@dataclasses.dataclass(frozen=True)
class ProductRecord:
	product_id: str
	name: str
	internal_code: str = ""
	price: float = 0.0
	barcode: str | None = None
	stock: float | None = None
	stock_unit: str | None = None
	photo_url: str | None = None
	category_name: str | None = None
	size: str | None = None
	composition: str | None = None
	color: str | None = None
	box: str | None = None
	observation: str | None = None
	width: float | None = None
	length: float | None = None
	thickness: float | None = None
	diameter: float | None = None


@dataclasses.dataclass(frozen=True)
class CategoryGroup:
	category_name: str
	products: tuple[ProductRecord, ...]


#============================================
def _optional_text(value) -> str | None:
	"""
	Return stripped text, or None for missing or blank values.
	"""
	if value is None:
		return None
	text = str(value).strip()
	if not text:
		return None
	return text


#============================================
def _optional_number(value) -> float | None:
	"""
	Return a finite float, or None for missing or unusable values.
	"""
	if value is None or value == "" or isinstance(value, bool):
		return None
	try:
		number = float(value)
	except (TypeError, ValueError):
		return None
	if not math.isfinite(number):
		return None
	return number


#============================================
def product_from_dict(data: dict) -> ProductRecord:
	"""
	Build a ProductRecord from a product row.

	Accepts the catalog database shape, where the category is nested as
	{"categories": {"name": ...}}, as well as a flat "category_name" key.

	Args:
		data: Product row dictionary.

	Returns:
		ProductRecord.
	"""
	category_name = data.get("category_name")
	categories = data.get("categories")
	if category_name is None and isinstance(categories, dict):
		category_name = categories.get("name")
	price = _optional_number(data.get("price"))
	return ProductRecord(
		product_id=str(data.get("id", data.get("product_id", ""))),
		name=str(data.get("name") or ""),
		internal_code=str(data.get("internal_code") or ""),
		price=price if price is not None else 0.0,
		barcode=_optional_text(data.get("barcode")),
		stock=_optional_number(data.get("stock")),
		stock_unit=_optional_text(data.get("stock_unit")),
		photo_url=_optional_text(data.get("photo_url")),
		category_name=_optional_text(category_name),
		size=_optional_text(data.get("size")),
		composition=_optional_text(data.get("composition")),
		color=_optional_text(data.get("color")),
		box=_optional_text(data.get("box")),
		observation=_optional_text(data.get("observation")),
		width=_optional_number(data.get("width")),
		length=_optional_number(data.get("length")),
		thickness=_optional_number(data.get("thickness")),
		diameter=_optional_number(data.get("diameter")),
	)


#============================================
def organize_products(products: list[ProductRecord]) -> list[CategoryGroup]:
	"""
	Group products by category and sort both levels by name.

	Products without a category land in the NO_CATEGORY_LABEL bucket, which
	sorts alphabetically with the named categories. Products sharing a name
	keep their input order.

	Args:
		products: Product records in input order.

	Returns:
		Category groups sorted by category name.
	"""
	by_category: dict[str, list[ProductRecord]] = {}
	for product in products:
		category_name = product.category_name or NO_CATEGORY_LABEL
		by_category.setdefault(category_name, []).append(product)

	groups: list[CategoryGroup] = []
	for category_name in sorted(by_category):
		members = sorted(by_category[category_name], key=lambda product: product.name)
		groups.append(CategoryGroup(category_name=category_name, products=tuple(members)))
	return groups
