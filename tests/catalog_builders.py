"""
Shared builders for catalog tests.
"""

# Standard Library
import base64
import io

# PIP3 modules
import PIL.Image

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config
import product_catalog_pdf.products
import product_catalog_pdf.session
import product_catalog_pdf.target


#============================================
def make_product(
	product_id: str,
	name: str,
	category_name: str | None = None,
	**fields,
) -> pcp.products.ProductRecord:
	"""
	Build a product with a code and price derived from its id.
	"""
	fields.setdefault("internal_code", f"C{product_id}")
	fields.setdefault("price", 10.0)
	return pcp.products.ProductRecord(
		product_id=product_id,
		name=name,
		category_name=category_name,
		**fields,
	)


#============================================
def make_products(category_name: str, count: int, prefix: str = "") -> list[pcp.products.ProductRecord]:
	tag = prefix or category_name
	return [
		make_product(f"{tag}-{index:03d}", f"{tag} item {index:03d}", category_name)
		for index in range(count)
	]


#============================================
def make_session(
	settings: pcp.config.CatalogSettings | None = None,
	template: pcp.config.LayoutTemplate | None = None,
	viewer: pcp.config.ViewerClass = pcp.config.ViewerClass.ADMIN,
	image_loader=None,
) -> pcp.session.RenderSession:
	"""
	Build a session drawing onto a recording target.
	"""
	settings = settings or pcp.config.CatalogSettings()
	target = pcp.target.RecordingRenderTarget(settings.page.width_mm, settings.page.height_mm)
	return pcp.session.RenderSession(
		target=target,
		cursor=pcp.session.PageCursor(),
		settings=settings,
		template=template,
		viewer=viewer,
		image_loader=image_loader,
	)


#============================================
def make_png_bytes(size: tuple[int, int] = (40, 20), color: str = "red") -> bytes:
	image = PIL.Image.new("RGB", size, color)
	buffer = io.BytesIO()
	image.save(buffer, format="PNG")
	return buffer.getvalue()


#============================================
def make_data_url(size: tuple[int, int] = (40, 20), color: str = "red") -> str:
	payload = base64.b64encode(make_png_bytes(size, color)).decode("ascii")
	return f"data:image/png;base64,{payload}"


#============================================
def drawn_texts(target: pcp.target.RecordingRenderTarget, ignore: tuple[str, ...] = ()) -> list[str]:
	return [op.values["text"] for op in target.ops_of_kind("text") if op.values["text"] not in ignore]
