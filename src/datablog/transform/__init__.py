"""Modules implementing the "Transform" step of the datablog data pipeline.

Each module takes the raw dataframes produced by the corresponding module in
:mod:`datablog.extract` and:

1. Renames columns to snake_case names that carry their units where it matters
   (e.g. ``air_temp_max_c``, ``generation_thousand_mwh``).
2. Converts values to appropriate types, replacing each source's missing value codes
   (``-999`` at CoAgMet, ``-1`` in Tracking the Sun) with NaN.
3. Computes the derived tables used in posts: shares of generation by fuel, stations
   and installations per year, degree days and severe weather risk counts.

:mod:`datablog.transform.degree_days` is not tied to one source. It works on any table
of daily minimum and maximum temperatures.
"""

from . import afdc  # noqa: F401
from . import coagmet  # noqa: F401
from . import degree_days  # noqa: F401
from . import eia  # noqa: F401
from . import solar  # noqa: F401
from . import spc  # noqa: F401
