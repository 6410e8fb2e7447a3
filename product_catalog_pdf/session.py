"""
Per-run render state shared by the renderers and the pagination engine.
"""

# Standard Library
import dataclasses

# local repo modules
import product_catalog_pdf as pcp
import product_catalog_pdf.config
import product_catalog_pdf.images
import product_catalog_pdf.target


CatalogSettings = pcp.config.CatalogSettings
LayoutTemplate = pcp.config.LayoutTemplate
ViewerClass = pcp.config.ViewerClass
ImageLoader = pcp.images.ImageLoader
RenderTarget = pcp.target.RenderTarget


@dataclasses.dataclass
class PageCursor:
	page_index: int = -1
	content_y: float = 0.0
	cards_on_current_page: int = 0
	has_content: bool = False


@dataclasses.dataclass
class RenderSession:
	"""
	Everything one generation run draws with.

	The target, cursor and warnings list are owned by the run. Switching
	to a category's template and settings produces a sibling session
	that shares them.
	"""

	target: RenderTarget
	cursor: PageCursor
	settings: CatalogSettings
	template: LayoutTemplate | None = None
	viewer: ViewerClass = ViewerClass.ADMIN
	image_loader: ImageLoader | None = None
	warnings: list[str] = dataclasses.field(default_factory=list)
	verbose: bool = False

	def with_category(self, template: LayoutTemplate | None, settings: CatalogSettings) -> "RenderSession":
		return dataclasses.replace(self, template=template, settings=settings)

	def warn(self, message: str) -> None:
		self.warnings.append(message)
		if self.verbose:
			print(f"Warning: {message}")
