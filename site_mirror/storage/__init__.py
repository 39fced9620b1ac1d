"""Local mirror layout: URL → path mapping and the file writer."""
from site_mirror.storage.paths import guess_is_markup, local_path, relative_link
from site_mirror.storage.writer import MirrorWriter

__all__ = ["MirrorWriter", "local_path", "relative_link", "guess_is_markup"]
