# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.

"""
Find the raw disk behind a SAS identifier and the device mapper device (if any) that owns it.

Each finder returns a (disk, dm) tuple of device paths, with empty strings for whatever
was not found. Not finding anything is not an error, but failures to read the host
(other than a path not existing) are raised to the caller.
"""

import os

from toolz.functoolz import pipe
from toolz.curried import map as cmap, filter as cfilter

from emf_sas import conf
from emf_sas.exceptions import InvalidDevicePathError
from emf_sas.lib.host_probe import is_not_found
from emf_sas.log import daemon_log


def _entry_names(dirname, probe):
    try:
        entries = probe.read_dir(dirname)
    except OSError as os_error:
        if is_not_found(os_error):
            return []
        raise

    return pipe(entries, cmap(lambda entry: entry.name), list)


def find_device_for_path(path, probe):
    """
    Find the underlying disk for a linked path such as /dev/disk/by-path/XXXX or /dev/mapper/XXXX,
    returns sdX, hdX, dm-X etc. If /dev/sdX is passed in then sdX will be returned.
    """
    device_path = probe.eval_symlinks(path)

    # /dev/sdX splits into "", "dev", "sdX"
    parts = device_path.split("/")
    if len(parts) == 3 and parts[1].startswith("dev"):
        return parts[2]

    raise InvalidDevicePathError(device_path)


def find_multipath_device_for_device(device, probe):
    """
    Given a device such as /dev/sdx find the device mapper device that has it as a slave.

    :return: /dev/dm-N of the first owner in /sys/block listing order, or "" if there is none
    """
    disk = find_device_for_path(device, probe)

    for name in pipe(_entry_names(conf.SYSBLOCKPATH, probe), cfilter(lambda n: n.startswith("dm-")), list):
        try:
            probe.lstat(os.path.join(conf.SYSBLOCKPATH, name, "slaves", disk))
        except OSError as os_error:
            if is_not_found(os_error):
                continue
            raise

        return os.path.join(conf.DEVPATH, name)

    return ""


def _find_disk(dirname, matches, probe, logger, ignore_symlink_errors=False):
    for name in pipe(_entry_names(dirname, probe), cfilter(matches), list):
        link = os.path.join(dirname, name)
        logger.debug("evaluating symbolic link %s" % link)

        try:
            disk = probe.eval_symlinks(link)
        except OSError as os_error:
            if not ignore_symlink_errors:
                raise
            logger.warning("sas: failed to find a corresponding disk from symlink %s: %s" % (link, os_error))
            continue

        dm = find_multipath_device_for_device(disk, probe)
        logger.debug("found disk %s dm %s from %s" % (disk, dm or "(none)", link))

        return disk, dm

    return "", ""


def find_disk_by_path(wwn, lun, probe, logger=None):
    """Given a wwn and lun find the disk through /dev/disk/by-path"""
    logger = logger or daemon_log
    fragment = "-0x%s-lun-%s" % (wwn, lun)
    logger.debug("find disk wwn %s lun %s, searching for %s" % (wwn, lun, fragment))

    return _find_disk(conf.DISKBYPATHPATH, lambda name: fragment in name, probe, logger)


def find_disk_by_wwn(wwn, probe, logger=None):
    """Given a wwn find the disk through the wwn-0x<wwn> links of /dev/disk/by-id"""
    logger = logger or daemon_log
    fragment = "wwn-0x%s" % wwn
    logger.debug("find disk wwn %s, searching for %s" % (wwn, fragment))

    return _find_disk(conf.DISKBYIDPATH, lambda name: fragment in name, probe, logger, ignore_symlink_errors=True)


def find_disk_by_wwid(wwid, probe, logger=None):
    """
    Given a wwid find the disk through the scsi-<wwid> link of /dev/disk/by-id

    A wwid looks like 3600508b400105e210000900000490000 (<vendor> <identifier>), exposed as
    /dev/disk/by-id/scsi-3600508b400105e210000900000490000. White space in a wwid is replaced
    with underscores by udev, so the caller has to pass the wwid as it appears under by-id.
    """
    logger = logger or daemon_log
    link_name = "scsi-%s" % wwid
    logger.debug("find disk wwid %s, searching for %s" % (wwid, link_name))

    disk, dm = _find_disk(conf.DISKBYIDPATH, lambda name: name == link_name, probe, logger)

    if not disk:
        logger.info("sas: failed to find a disk %s%s" % (conf.DISKBYIDPATH, link_name))

    return disk, dm
