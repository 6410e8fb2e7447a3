"""
CLI entry points for product catalog generation.
"""

# Standard Library
import argparse
import json
import pathlib
import time

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config
import product_catalog_pdf.generator
import product_catalog_pdf.products
import product_catalog_pdf.store


ViewerClass = pcp.config.ViewerClass


#============================================
def load_products(path: pathlib.Path) -> list[pcp.products.ProductRecord]:
	"""
	Load product rows from a JSON file.

	The file holds either a list of rows or an object with a "products" list.

	Args:
		path: Products JSON path.

	Returns:
		Product records in file order.
	"""
	with path.open("r", encoding="utf-8") as handle:
		data = json.load(handle)
	if isinstance(data, dict):
		data = data.get("products", [])
	if not isinstance(data, list):
		raise ValueError(f"Products file must hold a list of products: {path}")
	return [pcp.products.product_from_dict(row) for row in data if isinstance(row, dict)]


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, sys.argv when None.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Generate a product catalog PDF.")
	parser.add_argument("products", help="Products JSON file.")

	input_group = parser.add_argument_group("Input")
	input_group.add_argument("-c", "--config", dest="config_path", default=None, help="Configuration store JSON file.")
	input_group.add_argument(
		"-v",
		"--viewer",
		dest="viewer",
		default=ViewerClass.ADMIN.value,
		choices=[viewer.value for viewer in ViewerClass],
		help="Viewer class used for field visibility.",
	)

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output-dir", dest="output_dir", default=".", help="Output directory.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	mode_group = parser.add_argument_group("Mode")
	mode_group.add_argument(
		"-t",
		"--multi-template",
		dest="multi_template",
		action="store_true",
		help="Use the per-category template map.",
	)
	mode_group.add_argument("--preview", dest="preview", action="store_true", help="Render a single preview card.")
	mode_group.add_argument("-q", "--quiet", dest="verbose", action="store_false", help="Hide per-category progress.")

	parser.set_defaults(
		multi_template=False,
		preview=False,
		verbose=True,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> pcp.generator.CatalogResult | None:
	"""
	Run catalog generation from parsed arguments.

	Args:
		args: Parsed argparse namespace.

	Returns:
		CatalogResult, or None when nothing was generated.
	"""
	print("Product catalog PDF")
	products_path = pathlib.Path(args.products)
	print(f"Products: {products_path}")
	if args.config_path:
		print(f"Config: {args.config_path}")
	print(f"Viewer: {args.viewer}")

	start_time = time.perf_counter()
	products = load_products(products_path)
	print(f"Products loaded: {len(products)}")

	store = None
	if args.config_path:
		store = pcp.store.JsonConfigStore(args.config_path)
	settings = pcp.store.load_catalog_settings(store)
	viewer = ViewerClass(args.viewer)

	if args.preview:
		template = pcp.store.load_layout_template(store)
		result = pcp.generator.generate_preview(
			products,
			settings,
			template,
			output_dir=args.output_dir,
			viewer=viewer,
		)
	elif args.multi_template:
		registry = pcp.store.load_named_templates(store)
		category_templates = pcp.store.load_category_templates(store)
		print(f"Templates registered: {len(registry)}")
		result = pcp.generator.generate_catalog_with_templates(
			products,
			settings,
			category_templates,
			registry,
			output_dir=args.output_dir,
			viewer=viewer,
			verbose=args.verbose,
		)
	else:
		template = pcp.store.load_layout_template(store)
		if template is not None:
			print(f"Card template elements: {len(template.elements)}")
		result = pcp.generator.generate_catalog(
			products,
			settings,
			template,
			output_dir=args.output_dir,
			viewer=viewer,
			verbose=args.verbose,
		)

	if result is None:
		return None
	if args.manifest_path:
		pcp.generator.write_manifest(pathlib.Path(args.manifest_path), result, settings)
		print(f"Manifest written: {args.manifest_path}")
	total_time = time.perf_counter() - start_time
	print(f"Timing: total={total_time:.2f}s")
	return result


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	run_pipeline(args)
