# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.


import os

from emf_sas import conf
from emf_sas.device_locator import find_disk_by_path, find_disk_by_wwn, find_disk_by_wwid
from emf_sas.exceptions import DeviceNotFoundError
from emf_sas.lib.host_probe import is_not_found
from emf_sas.log import daemon_log
from emf_sas.multipath import find_slave_devices_on_multipath


def scsi_host_rescan(probe, logger=None):
    """
    Ask every scsi host to rescan all of its channels, targets and luns.

    A host that can't be written to is logged and the remaining hosts are still rescanned.
    """
    logger = logger or daemon_log
    logger.debug("scsi host rescan %s" % conf.SCSIHOSTPATH)

    try:
        hosts = probe.read_dir(conf.SCSIHOSTPATH)
    except OSError as os_error:
        if is_not_found(os_error):
            logger.warning("No scsi hosts to rescan, %s does not exist" % conf.SCSIHOSTPATH)
            return
        raise

    for host in hosts:
        scan_file = os.path.join(conf.SCSIHOSTPATH, host.name, "scan")
        logger.debug("writing '%s' to %s" % (conf.RESCAN_TRIGGER, scan_file))
        try:
            probe.write_file(scan_file, conf.RESCAN_TRIGGER.encode("ascii"), conf.SYSFS_WRITE_MODE)
        except OSError as os_error:
            logger.warning("Failed to rescan scsi host %s: %s" % (host.name, os_error))


def _finder_for(connector, logger):
    if connector.target_wwns:
        return lambda wwn, probe: find_disk_by_path(wwn, connector.lun, probe, logger)
    elif connector.wwids:
        return lambda wwid, probe: find_disk_by_wwid(wwid, probe, logger)
    else:
        return lambda wwn, probe: find_disk_by_wwn(wwn, probe, logger)


def _search_pass(identifiers, finder, probe, logger):
    """One walk of the identifiers, stopping at the first that has a multipath device"""
    disk = ""
    for identifier in identifiers:
        logger.debug("search for disk %s" % identifier)
        found_disk, dm = finder(identifier, probe)
        disk = found_disk or disk

        if dm:
            return disk, dm

    return disk, ""


def search_disk(connector, probe, logger=None):
    """
    Find the device for the connector's identifiers and record it on the connector.

    The paths that already exist are searched first. If that finds no multipath device the scsi
    hosts are rescanned (once) and the search repeated, because a newly mapped volume may not be
    visible yet. A multipath device is preferred over a raw disk whichever pass found it.

    :return: the device path to use
    """
    logger = logger or daemon_log
    identifiers = connector.identifiers
    finder = _finder_for(connector, logger)

    connector.reset()

    disk = ""
    dm = ""
    for attempt in range(conf.MAX_SEARCH_ATTEMPTS):
        if attempt > 0:
            logger.info("No multipath device found for %s, rescanning scsi hosts" % ", ".join(identifiers))
            scsi_host_rescan(probe, logger)

        found_disk, dm = _search_pass(identifiers, finder, probe, logger)
        disk = found_disk or disk

        if dm:
            break

    if dm:
        connector.multipath = True
        connector.device_path = dm
        connector.scsi_devices = find_slave_devices_on_multipath(dm, probe) or ([disk] if disk else [])
        logger.info("multipath device %s discovered, slaves %s" % (dm, connector.scsi_devices))
    elif disk:
        connector.device_path = disk
        connector.scsi_devices = [disk]
        logger.info("disk %s discovered" % disk)
    else:
        raise DeviceNotFoundError(identifiers)

    return connector.device_path
