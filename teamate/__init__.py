"""
Teamate: optimal one-to-one matching between two participant cohorts.
"""

from teamate.utils.constants import APP_NAME, VERSION

__version__ = VERSION
__app_name__ = APP_NAME
