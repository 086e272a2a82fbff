import logging

import psutil

from .exceptions import DeviceError

# Where desktop systems auto-mount card readers and USB sticks
REMOVABLE_MOUNT_ROOTS = ('/media/', '/run/media/', '/Volumes/')


def is_removable(partition) -> bool:
    opts = (partition.opts or '').split(',')
    if 'removable' in opts:
        return True
    return partition.mountpoint.startswith(REMOVABLE_MOUNT_ROOTS)


def default_source() -> str:
    """
    Suggests an import source: the first removable disk, otherwise the
    last mounted disk.
    """
    partitions = psutil.disk_partitions(all=False)
    for part in partitions:
        if is_removable(part):
            logging.debug(f"Removable disk found at {part.mountpoint}")
            return part.mountpoint

    if not partitions:
        raise DeviceError("No disk found")
    return partitions[-1].mountpoint
