# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.

import errno
import os

DEVPATH = "/dev/"
DISKBYIDPATH = "/dev/disk/by-id/"
DISKBYPATHPATH = "/dev/disk/by-path/"
SYSBLOCKPATH = "/sys/block/"
SCSIHOSTPATH = "/sys/class/scsi_host/"

# Written to every /sys/class/scsi_host/<host>/scan to rescan all channels, targets and luns
RESCAN_TRIGGER = "- - -"
# Written to /sys/block/<dev>/device/delete to remove a device from the scsi subsystem
DELETE_TRIGGER = b"1"
SYSFS_WRITE_MODE = 0o666

# One pass over the existing paths, then one more after a scsi host rescan
MAX_SEARCH_ATTEMPTS = 2

DEFAULT_LUN = "1"

MULTIPATHD = "multipathd"

ENV_STATE_DIR = "EMF_SAS_STATE_DIR"
DEFAULT_STATE_DIR = "/var/lib/emf-sas"


def state_dir():
    """
    Directory that connector records are persisted in, created if need be.
    """
    path = os.environ.get(ENV_STATE_DIR, DEFAULT_STATE_DIR)

    try:
        os.makedirs(path, 0o755)
    except OSError as e:
        if e.errno != errno.EEXIST:
            raise

    return path


def connector_path(volume_name):
    return os.path.join(state_dir(), "%s.json" % volume_name)
