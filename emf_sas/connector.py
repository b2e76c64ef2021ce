# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.


import simplejson as json

from emf_sas import conf
from emf_sas.exceptions import ConnectorPersistError, ConnectorLoadError
from emf_sas.log import console_log


class Connector(object):
    """
    Everything needed to find a SAS volume on this node, and what was found.

    Identify the volume with one of
      target_wwns + lun: looked up through /dev/disk/by-path
      wwids:             looked up through the scsi-<wwid> links of /dev/disk/by-id
      target_wwn:        looked up through the wwn-0x<wwn> links of /dev/disk/by-id

    multipath, device_path and scsi_devices are filled in by attach.
    """

    # name -> factory for the default, these are also the persisted field names
    FIELDS = [
        ("volume_name", str),
        ("target_wwn", str),
        ("target_wwns", list),
        ("lun", lambda: conf.DEFAULT_LUN),
        ("wwids", list),
        ("multipath", bool),
        ("device_path", str),
        ("scsi_devices", list),
    ]

    def __init__(self, **kwargs):
        for name, default in self.FIELDS:
            value = kwargs.pop(name, None)
            setattr(self, name, default() if value is None else value)

        if kwargs:
            raise TypeError("Unknown connector fields: %s" % ", ".join(sorted(kwargs)))

    @property
    def target_device(self):
        return self.device_path

    @property
    def identifiers(self):
        if self.target_wwns:
            return list(self.target_wwns)
        elif self.wwids:
            return list(self.wwids)
        elif self.target_wwn:
            return [self.target_wwn]
        return []

    def reset(self):
        self.multipath = False
        self.device_path = ""
        self.scsi_devices = []

    def to_dict(self):
        return dict((name, getattr(self, name)) for name, _ in self.FIELDS)

    @classmethod
    def from_dict(cls, values):
        known = [name for name, _ in cls.FIELDS]
        return cls(**dict((k, v) for k, v in values.items() if k in known))

    def __eq__(self, other):
        return isinstance(other, Connector) and self.to_dict() == other.to_dict()

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return "Connector(%s)" % ", ".join("%s=%r" % item for item in sorted(self.to_dict().items()))

    def persist(self, file_path, logger=None):
        """Save the connector to file_path (ie /var/lib/emf-sas/myvolume.json), replacing any existing content"""
        logger = logger or console_log

        try:
            f = open(file_path, "w")
        except (IOError, OSError) as e:
            logger.error("Could not create file %s: %s" % (file_path, e))
            raise ConnectorPersistError(file_path, "create", e)

        with f:
            try:
                json.dump(self.to_dict(), f)
            except (TypeError, ValueError) as e:
                logger.error("Could not encode the connector: %s" % e)
                raise ConnectorPersistError(file_path, "encode", e)

    @classmethod
    def load(cls, file_path):
        try:
            with open(file_path, "r") as f:
                data = f.read()
        except (IOError, OSError) as e:
            raise ConnectorLoadError(file_path, "read", e)

        try:
            values = json.loads(data)
        except ValueError as e:
            raise ConnectorLoadError(file_path, "decode", e)

        if not isinstance(values, dict):
            raise ConnectorLoadError(file_path, "decode", "expected an object, got %s" % type(values).__name__)

        return cls.from_dict(values)


def get_connector_from_file(file_path):
    return Connector.load(file_path)
