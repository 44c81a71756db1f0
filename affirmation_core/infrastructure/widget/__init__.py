from .shared_file_storage import SharedFileWidgetStorage
from .signal_file_refresher import SignalFileRefresher
from .snapshot_reader import WidgetSnapshotReader

__all__ = ["SharedFileWidgetStorage", "SignalFileRefresher", "WidgetSnapshotReader"]
