from enum import IntEnum


class X402Version(IntEnum):
    Version1 = 1


#: Version stamped on every payment payload this client produces.
CURRENT_VERSION = X402Version.Version1
