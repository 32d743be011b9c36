"""Modules implementing the "Extract" step of the datablog data pipeline.

Each module in this subpackage retrieves data from a single public source, using the
:class:`datablog.workspace.fetcher.WebFetcher` to issue HTTP requests, and ends with
"raw" :class:`pandas.DataFrame` (or :class:`geopandas.GeoDataFrame`) objects that have
been minimally altered from the original data. Renaming, unit handling and the
summaries that go into blog posts happen in the :mod:`datablog.transform` subpackage.
"""

from . import afdc  # noqa: F401
from . import coagmet  # noqa: F401
from . import cpc  # noqa: F401
from . import eia  # noqa: F401
from . import solar  # noqa: F401
from . import spc  # noqa: F401
