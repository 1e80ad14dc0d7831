__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argtree'
__license__ = 'MIT'
__version__ = "0.0.0"

from .faults import *
from .inputs import *
from .features import *
from .commandsets import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the inputs
__all__ += inputs.__all__  # type: ignore[attr-defined]
# Load the exposed API of the features
__all__ += features.__all__  # type: ignore[attr-defined]
# Load the exposed API of the command sets
__all__ += commandsets.__all__  # type: ignore[attr-defined]
