# Local application imports
from samadhan.settings.common import CommonSettings


class DevSettings(CommonSettings):
    DEBUG_MODE: bool = True
    CACHE_ENABLED: bool = False
