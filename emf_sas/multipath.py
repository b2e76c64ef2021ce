# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.


import os

from emf_sas import conf
from emf_sas.exceptions import MultipathResizeError
from emf_sas.lib import shell
from emf_sas.lib.host_probe import is_not_found
from emf_sas.log import console_log


def find_slave_devices_on_multipath(dm, probe):
    """
    Return the slave devices of a multipath device such as /dev/dm-1, in /sys/block listing order.

    Anything that is not a /dev/<name> path has no slaves.
    """
    # /dev/dm-1 splits into "", "dev", "dm-1"
    parts = dm.split("/")
    if len(parts) != 3 or not parts[1].startswith("dev"):
        return []

    try:
        entries = probe.read_dir(os.path.join(conf.SYSBLOCKPATH, parts[2], "slaves"))
    except OSError as os_error:
        if is_not_found(os_error):
            return []
        raise

    return [os.path.join(conf.DEVPATH, entry.name) for entry in entries]


def resize_multipath_device(device_path, logger=None):
    """
    Have multipathd resize the map for device_path after its underlying devices have grown.
    """
    logger = logger or console_log
    logger.info("Resizing multipath device %s" % device_path)

    result = shell.Shell.run([conf.MULTIPATHD, "resize", "map", device_path], logger)

    if result.rc != 0:
        raise MultipathResizeError(device_path, result)
