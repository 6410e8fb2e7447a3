"""
Catalog generation entry points.
"""

# Standard Library
import asyncio
import dataclasses
import datetime
import json
import pathlib

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config
import product_catalog_pdf.geometry
import product_catalog_pdf.images
import product_catalog_pdf.pagination
import product_catalog_pdf.products
import product_catalog_pdf.render
import product_catalog_pdf.session
import product_catalog_pdf.target


CatalogSettings = pcp.config.CatalogSettings
LayoutTemplate = pcp.config.LayoutTemplate
NamedTemplate = pcp.config.NamedTemplate
ViewerClass = pcp.config.ViewerClass
ImageLoader = pcp.images.ImageLoader
LayoutReport = pcp.pagination.LayoutReport
ProductRecord = pcp.products.ProductRecord
PageCursor = pcp.session.PageCursor
RenderSession = pcp.session.RenderSession
RenderTarget = pcp.target.RenderTarget

OUTPUT_PREFIX_CATALOG = pcp.config.OUTPUT_PREFIX_CATALOG
OUTPUT_PREFIX_MULTI = pcp.config.OUTPUT_PREFIX_MULTI
OUTPUT_PREFIX_PREVIEW = pcp.config.OUTPUT_PREFIX_PREVIEW


@dataclasses.dataclass
class CatalogResult:
	output_path: pathlib.Path | None
	pages: int
	report: LayoutReport
	warnings: list[str]
	generated_at: datetime.datetime


#============================================
def build_output_name(prefix: str, generated_at: datetime.datetime) -> str:
	"""
	Build the download file name for a run.

	Args:
		prefix: File name prefix.
		generated_at: Run timestamp.

	Returns:
		Name like "catalogo-produtos-2024-05-01.pdf".
	"""
	return f"{prefix}-{generated_at.date().isoformat()}.pdf"


#============================================
def _open_target(
	target: RenderTarget | None,
	output_path: pathlib.Path | None,
	settings: CatalogSettings,
	title: str,
) -> RenderTarget:
	"""
	Return the caller's target or open a PDF target at the output path.
	"""
	if target is not None:
		return target
	output_path.parent.mkdir(parents=True, exist_ok=True)
	return pcp.target.PdfRenderTarget(
		output_path,
		settings.page.width_mm,
		settings.page.height_mm,
		title=title,
	)


#============================================
def _resolve_output_path(
	output_dir: str | pathlib.Path,
	output_path: str | pathlib.Path | None,
	prefix: str,
	generated_at: datetime.datetime,
) -> pathlib.Path:
	"""
	Pick the explicit output path or a dated name inside the output directory.

	Args:
		output_dir: Directory for generated names.
		output_path: Explicit path, or None.
		prefix: Output name prefix.
		generated_at: Run timestamp.

	Returns:
		Output path.
	"""
	if output_path is not None:
		return pathlib.Path(output_path)
	return pathlib.Path(output_dir) / build_output_name(prefix, generated_at)


#============================================
def print_summary(result: CatalogResult) -> None:
	"""
	Print the end-of-run summary.

	Args:
		result: Finished run result.
	"""
	report = result.report
	categories = len(report.titles)
	print(f"Cards placed: {len(report.cards)} in {categories} categories")
	print(f"Pages: {result.pages}")
	if report.skipped_categories:
		print(f"Skipped categories: {len(report.skipped_categories)} ({', '.join(report.skipped_categories)})")
	if result.warnings:
		print(f"Warnings: {len(result.warnings)}")
	if result.output_path is not None:
		print(f"Catalog written: {result.output_path}")


#============================================
async def _render_catalog(
	products: list[ProductRecord],
	settings: CatalogSettings,
	template: LayoutTemplate | None,
	viewer: ViewerClass,
	output_path: pathlib.Path | None,
	generated_at: datetime.datetime,
	target: RenderTarget | None,
	image_loader: ImageLoader | None,
	verbose: bool,
	category_templates: dict[str, str] | None = None,
	registry: dict[str, NamedTemplate] | None = None,
) -> CatalogResult:
	"""
	Draw the cover and the paginated categories, then finish the target.

	A loader created here is closed before returning.

	Returns:
		CatalogResult for the run.
	"""
	target = _open_target(target, output_path, settings, settings.cover.title)
	loader = image_loader or ImageLoader()
	session = RenderSession(
		target=target,
		cursor=PageCursor(),
		settings=settings,
		template=template,
		viewer=viewer,
		image_loader=loader,
		verbose=verbose,
	)
	geometry = pcp.geometry.compute_layout_geometry(
		settings.page,
		settings.grid,
		title_reserve=settings.title_style.margin_bottom,
	)
	if verbose:
		print(
			f"Page {settings.page.width_mm:.0f}x{settings.page.height_mm:.0f} mm, "
			f"grid {settings.grid.rows}x{settings.grid.columns}, "
			f"card {geometry.card_w:.1f}x{geometry.card_h:.1f} mm"
		)
	groups = pcp.products.organize_products(products)
	try:
		if settings.cover.enabled:
			session.cursor.page_index = target.new_page()
			await pcp.render.render_cover(session, settings.cover, generated_at)
		report = await pcp.pagination.paginate(
			session,
			groups,
			geometry,
			category_templates=category_templates,
			registry=registry,
		)
		target.finish()
	finally:
		if image_loader is None:
			await loader.aclose()
	result = CatalogResult(
		output_path=output_path,
		pages=target.page_count,
		report=report,
		warnings=list(session.warnings),
		generated_at=generated_at,
	)
	print_summary(result)
	return result


#============================================
async def generate_catalog_async(
	products: list[ProductRecord],
	settings: CatalogSettings | None = None,
	template: LayoutTemplate | None = None,
	output_dir: str | pathlib.Path = ".",
	viewer: ViewerClass = ViewerClass.ADMIN,
	output_path: str | pathlib.Path | None = None,
	generated_at: datetime.datetime | None = None,
	target: RenderTarget | None = None,
	image_loader: ImageLoader | None = None,
	verbose: bool = False,
) -> CatalogResult | None:
	"""
	Generate the full catalog: cover, then every category.

	Args:
		products: Product records.
		settings: Catalog settings, defaults when None.
		template: Single element template, or None for the default card.
		output_dir: Directory for the dated output file.
		viewer: Viewer class for field gating.
		output_path: Explicit output file, overrides output_dir.
		generated_at: Run timestamp, now when None.
		target: Render target to draw on instead of a PDF file.
		image_loader: Shared image loader, a private one when None.
		verbose: Print per-category progress.

	Returns:
		CatalogResult, or None when there are no products.
	"""
	if not products:
		print("No products to generate a catalog from")
		return None
	settings = settings or CatalogSettings()
	generated_at = generated_at or datetime.datetime.now()
	path = None
	if target is None:
		path = _resolve_output_path(output_dir, output_path, OUTPUT_PREFIX_CATALOG, generated_at)
	return await _render_catalog(
		products,
		settings,
		template,
		viewer,
		path,
		generated_at,
		target,
		image_loader,
		verbose,
	)


#============================================
async def generate_catalog_with_templates_async(
	products: list[ProductRecord],
	settings: CatalogSettings | None,
	category_templates: dict[str, str],
	registry: dict[str, NamedTemplate],
	output_dir: str | pathlib.Path = ".",
	viewer: ViewerClass = ViewerClass.ADMIN,
	output_path: str | pathlib.Path | None = None,
	generated_at: datetime.datetime | None = None,
	target: RenderTarget | None = None,
	image_loader: ImageLoader | None = None,
	verbose: bool = False,
) -> CatalogResult | None:
	"""
	Generate the catalog with a template chosen per category.

	Categories without a registered template are skipped.

	Args:
		products: Product records.
		settings: Catalog settings, defaults when None.
		category_templates: Category name to template id.
		registry: Template id to NamedTemplate.
		output_dir: Directory for the dated output file.
		viewer: Viewer class for field gating.
		output_path: Explicit output file, overrides output_dir.
		generated_at: Run timestamp, now when None.
		target: Render target to draw on instead of a PDF file.
		image_loader: Shared image loader, a private one when None.
		verbose: Print per-category progress.

	Returns:
		CatalogResult, or None when there are no products.

	Raises:
		ValueError: When no templates are registered.
	"""
	if not registry:
		raise ValueError("No catalog templates are registered")
	if not products:
		print("No products to generate a catalog from")
		return None
	settings = settings or CatalogSettings()
	generated_at = generated_at or datetime.datetime.now()
	path = None
	if target is None:
		path = _resolve_output_path(output_dir, output_path, OUTPUT_PREFIX_MULTI, generated_at)
	return await _render_catalog(
		products,
		settings,
		None,
		viewer,
		path,
		generated_at,
		target,
		image_loader,
		verbose,
		category_templates=category_templates,
		registry=registry,
	)


#============================================
async def generate_preview_async(
	products: list[ProductRecord],
	settings: CatalogSettings | None,
	template: LayoutTemplate | None,
	output_dir: str | pathlib.Path = ".",
	viewer: ViewerClass = ViewerClass.ADMIN,
	output_path: str | pathlib.Path | None = None,
	generated_at: datetime.datetime | None = None,
	target: RenderTarget | None = None,
	image_loader: ImageLoader | None = None,
) -> CatalogResult | None:
	"""
	Render the first product as a single centered template card.

	Args:
		products: Product records; only the first is drawn.
		settings: Catalog settings, defaults when None.
		template: Element template to preview.
		output_dir: Directory for the dated output file.
		viewer: Viewer class for field gating.
		output_path: Explicit output file, overrides output_dir.
		generated_at: Run timestamp, now when None.
		target: Render target to draw on instead of a PDF file.
		image_loader: Shared image loader, a private one when None.

	Returns:
		CatalogResult, or None without a template or products.
	"""
	if template is None or not template.elements:
		print("No card template saved, nothing to preview")
		return None
	if not products:
		print("No products to preview")
		return None
	settings = settings or CatalogSettings()
	generated_at = generated_at or datetime.datetime.now()
	path = None
	if target is None:
		path = _resolve_output_path(output_dir, output_path, OUTPUT_PREFIX_PREVIEW, generated_at)
	target = _open_target(target, path, settings, "Preview")
	loader = image_loader or ImageLoader()
	session = RenderSession(
		target=target,
		cursor=PageCursor(),
		settings=settings,
		template=template,
		viewer=viewer,
		image_loader=loader,
	)

	page = settings.page
	margin = pcp.config.PREVIEW_MARGIN
	scale = pcp.config.PREVIEW_SCALE
	card_w = pcp.geometry.clamp_dimension(min(template.ref_card_width * scale, page.width_mm - margin * 2))
	card_h = pcp.geometry.clamp_dimension(min(template.ref_card_height * scale, page.height_mm - margin * 2))
	x = (page.width_mm - card_w) / 2.0
	y = margin * 2
	product = products[0]
	try:
		session.cursor.page_index = target.new_page()
		await pcp.render.render_card(session, product, x, y, card_w, card_h)
		target.finish()
	finally:
		if image_loader is None:
			await loader.aclose()

	category_name = product.category_name or pcp.config.NO_CATEGORY_LABEL
	report = LayoutReport()
	report.cards.append(
		pcp.pagination.CardPlacement(
			page_index=session.cursor.page_index,
			category_name=category_name,
			product_id=product.product_id,
			slot=0,
			row=0,
			column=0,
			x=x,
			y=y,
			width=card_w,
			height=card_h,
		)
	)
	result = CatalogResult(
		output_path=path,
		pages=target.page_count,
		report=report,
		warnings=list(session.warnings),
		generated_at=generated_at,
	)
	if path is not None:
		print(f"Preview written: {path}")
	return result


#============================================
def generate_catalog(*args, **kwargs) -> CatalogResult | None:
	"""
	Blocking wrapper around generate_catalog_async.

	Args:
		*args: Positional arguments for generate_catalog_async.
		**kwargs: Keyword arguments for generate_catalog_async.

	Returns:
		CatalogResult, or None when there are no products.
	"""
	return asyncio.run(generate_catalog_async(*args, **kwargs))


#============================================
def generate_catalog_with_templates(*args, **kwargs) -> CatalogResult | None:
	"""
	Blocking wrapper around generate_catalog_with_templates_async.

	Args:
		*args: Positional arguments for generate_catalog_with_templates_async.
		**kwargs: Keyword arguments for generate_catalog_with_templates_async.

	Returns:
		CatalogResult, or None when there are no products.

	Raises:
		ValueError: No catalog templates are registered.
	"""
	return asyncio.run(generate_catalog_with_templates_async(*args, **kwargs))


#============================================
def generate_preview(*args, **kwargs) -> CatalogResult | None:
	"""
	Blocking wrapper around generate_preview_async.

	Args:
		*args: Positional arguments for generate_preview_async.
		**kwargs: Keyword arguments for generate_preview_async.

	Returns:
		CatalogResult, or None without a usable template or products.
	"""
	return asyncio.run(generate_preview_async(*args, **kwargs))


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	result: CatalogResult,
	settings: CatalogSettings,
) -> None:
	"""
	Write a manifest JSON file describing a run.

	Args:
		manifest_path: Output path.
		result: Run result.
		settings: Settings used for the run.
	"""
	report = result.report
	data = {
		"output": str(result.output_path) if result.output_path is not None else None,
		"generated_at": result.generated_at.isoformat(),
		"pages": result.pages,
		"cards_placed": len(report.cards),
		"skipped_categories": list(report.skipped_categories),
		"warnings": list(result.warnings),
		"layout": {
			"page": dataclasses.asdict(settings.page),
			"grid": dataclasses.asdict(settings.grid),
			"category_title": dataclasses.asdict(settings.title_style),
			"capacity": settings.grid.capacity,
		},
		"titles": [dataclasses.asdict(title) for title in report.titles],
		"cards": [dataclasses.asdict(card) for card in report.cards],
	}
	manifest_path.parent.mkdir(parents=True, exist_ok=True)
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
