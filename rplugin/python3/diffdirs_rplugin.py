"""Remote plugin manifest entry; the implementation lives in diffdirs.nvim.plugin."""

from diffdirs.nvim.plugin import DiffDirsPlugin  # noqa: F401
