# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.


class SasError(Exception):
    pass


class DeviceNotFoundError(SasError):
    """
    No disk or multipath device matched the identifiers, even after a scsi host rescan.
    """

    def __init__(self, identifiers):
        self.identifiers = list(identifiers)
        super(DeviceNotFoundError, self).__init__()

    def __str__(self):
        return "no SAS disk found for %s" % ", ".join(self.identifiers)


class InvalidDevicePathError(SasError):
    def __init__(self, path):
        self.path = path
        super(InvalidDevicePathError, self).__init__()

    def __str__(self):
        return "invalid device name: %s" % self.path


class DetachError(SasError):
    """
    Removal of one or more devices failed. Every device was still attempted,
    device and cause refer to the last failure.
    """

    def __init__(self, device, cause, failed_devices=None):
        self.device = device
        self.cause = cause
        self.failed_devices = failed_devices or [device]
        super(DetachError, self).__init__()

    def __str__(self):
        return "sas: detach failed for device %s: %s" % (self.device, self.cause)


class MultipathResizeError(SasError):
    def __init__(self, device, result):
        self.device = device
        self.result = result
        super(MultipathResizeError, self).__init__()

    @property
    def output(self):
        return self.result.stdout + self.result.stderr

    def __str__(self):
        return "could not resize multipath device %s: %s (exit status %s)" % (
            self.device,
            self.output.strip(),
            self.result.rc,
        )


class ConnectorPersistError(SasError):
    def __init__(self, path, step, cause):
        self.path = path
        self.step = step
        self.cause = cause
        super(ConnectorPersistError, self).__init__()

    def __str__(self):
        return "error persisting connector to %s (%s): %s" % (self.path, self.step, self.cause)


class ConnectorLoadError(SasError):
    def __init__(self, path, step, cause):
        self.path = path
        self.step = step
        self.cause = cause
        super(ConnectorLoadError, self).__init__()

    def __str__(self):
        return "error loading connector from %s (%s): %s" % (self.path, self.step, self.cause)
