# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .RoomStore          import RoomStore, ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH
from .ConnectionRegistry import ConnectionRegistry
from .message_handlers   import SyncProtocolHandler, DEBOUNCE_THRESHOLD
from .SyncWatch          import RoomActor, sync_watch, EVENT_TIMEOUT
