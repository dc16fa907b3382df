"""Bundle compilation / publishing errors."""


class BundleError(Exception):
    """Base class for bundle failures surfaced to callers."""


class NoTokensError(BundleError):
    """Raised when a global bundle is requested for an empty token set."""

    def __init__(self, project_id: str = ""):
        self.project_id = project_id
        where = f" for project {project_id}" if project_id else ""
        super().__init__(
            f"No active tokens to compile{where}. Upload or activate token files first."
        )


class BundleSinkError(BundleError):
    """Raised when a storage sink fails to read or write a bundle."""
