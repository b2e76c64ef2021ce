# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.


import os

from emf_sas import conf
from emf_sas.discovery import search_disk
from emf_sas.exceptions import DetachError, InvalidDevicePathError, SasError
from emf_sas.lib.host_probe import OsHostProbe
from emf_sas.log import console_log
from emf_sas.multipath import find_slave_devices_on_multipath


def attach(connector, probe=None, logger=None):
    """
    Find the SAS volume described by connector on this node.

    :return: the device path to use, also recorded on the connector
    """
    probe = probe or OsHostProbe()
    logger = logger or console_log

    logger.info("Attaching SAS volume %s" % (connector.volume_name or ", ".join(connector.identifiers)))

    try:
        return search_disk(connector, probe, logger)
    except (SasError, OSError) as e:
        logger.info("unable to find disk given WWNs or WWIDs: %s" % e)
        raise


def detach(device_path, probe=None, logger=None):
    """
    Remove the scsi devices behind device_path from the node. A multipath device has each of its
    slaves removed, anything else is removed itself.

    Every device is attempted even when an earlier one fails, a DetachError for the last failure
    is raised once they have all been tried.
    """
    probe = probe or OsHostProbe()
    logger = logger or console_log

    if not device_path.startswith(conf.DEVPATH):
        raise InvalidDevicePathError(device_path)

    logger.info("Detaching SAS volume %s" % device_path)

    dst_path = probe.eval_symlinks(device_path)

    if dst_path.startswith(os.path.join(conf.DEVPATH, "dm-")):
        devices = find_slave_devices_on_multipath(dst_path, probe)
        if not devices:
            logger.warning("sas: multipath device %s has no slave devices to remove" % dst_path)
    else:
        devices = [dst_path]

    logger.debug("sas: detach disk %s (%s), devices %s" % (device_path, dst_path, devices))

    failed = []
    last_error = None
    for device in devices:
        try:
            detach_sas_disk(device, probe, logger)
        except (InvalidDevicePathError, OSError) as e:
            logger.error("sas: detach of %s failed: %s" % (device, e))
            failed.append(device)
            last_error = DetachError(device, e, failed)

    if last_error:
        logger.error("sas: last error occurred during detach disk: %s" % last_error)
        raise last_error


def detach_sas_disk(device_path, probe, logger=None):
    """Remove a scsi device such as /dev/sdX from the node"""
    if not device_path.startswith(conf.DEVPATH):
        raise InvalidDevicePathError(device_path)

    remove_from_scsi_subsystem(os.path.basename(device_path), probe, logger)


def remove_from_scsi_subsystem(device_name, probe, logger=None):
    logger = logger or console_log
    delete_file = os.path.join(conf.SYSBLOCKPATH, device_name, "device", "delete")

    logger.info("sas: remove device from scsi-subsystem: %s" % delete_file)
    probe.write_file(delete_file, conf.DELETE_TRIGGER, conf.SYSFS_WRITE_MODE)
