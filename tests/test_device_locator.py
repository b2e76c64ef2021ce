import errno

from emf_sas.device_locator import (
    find_device_for_path,
    find_disk_by_path,
    find_disk_by_wwid,
    find_disk_by_wwn,
    find_multipath_device_for_device,
)
from emf_sas.exceptions import InvalidDevicePathError
from emf_sas.test.fake_host_probe import FakeHostProbe
from emf_sas.test.sas_unit_testcase import SasUnitTestCase

WWN = "500a0981891b8dc5"
WWID = "3600508b400105e210000900000490000"
BY_PATH_LINK = "/dev/disk/by-path/pci-0000:41:00.0-sas-0x500a0981891b8dc5-lun-0"


class TestFindMultipathDeviceForDevice(SasUnitTestCase):
    def setUp(self):
        super(TestFindMultipathDeviceForDevice, self).setUp()
        self.probe.add_scsi_disk("sda")
        self.probe.add_scsi_disk("sdb")

    def test_owner_found(self):
        self.probe.add_multipath("dm-1", "sda", "sdb")

        self.assertEqual(find_multipath_device_for_device("/dev/sda", self.probe), "/dev/dm-1")

    def test_first_owner_in_listing_order(self):
        self.probe.add_multipath("dm-3", "sda")
        self.probe.add_multipath("dm-0", "sda")

        self.assertEqual(find_multipath_device_for_device("/dev/sda", self.probe), "/dev/dm-3")

    def test_no_owner(self):
        self.probe.add_multipath("dm-1", "sdb")

        self.assertEqual(find_multipath_device_for_device("/dev/sda", self.probe), "")

    def test_only_dm_entries_are_checked(self):
        self.probe.add_multipath("dm-1", "sdb")

        find_multipath_device_for_device("/dev/sda", self.probe)

        self.assertEqual(self.probe.calls_to("lstat"), ["/sys/block/dm-1/slaves/sda"])

    def test_follows_links(self):
        self.probe.add_multipath("dm-1", "sda")
        self.probe.add_link("/dev/disk/by-id/wwn-0x%s" % WWN, "/dev/sda")

        self.assertEqual(find_multipath_device_for_device("/dev/disk/by-id/wwn-0x%s" % WWN, self.probe), "/dev/dm-1")

    def test_lstat_errors_propagate(self):
        self.probe.add_multipath("dm-1", "sda")
        self.probe.fail("/sys/block/dm-1/slaves/sda", errno.EACCES)

        with self.assertRaises(OSError) as context:
            find_multipath_device_for_device("/dev/sda", self.probe)

        self.assertEqual(context.exception.errno, errno.EACCES)

    def test_missing_sys_block_is_no_owner(self):
        host = FakeHostProbe()
        host.add_file("/dev/sda")

        self.assertEqual(find_multipath_device_for_device("/dev/sda", host), "")
        self.assertEqual(host.calls_to("lstat"), [])

    def test_sys_block_read_errors_propagate(self):
        self.probe.fail("/sys/block", errno.EACCES)

        with self.assertRaises(OSError) as context:
            find_multipath_device_for_device("/dev/sda", self.probe)

        self.assertEqual(context.exception.errno, errno.EACCES)

    def test_find_device_for_path(self):
        self.assertEqual(find_device_for_path("/dev/sda", self.probe), "sda")

    def test_find_device_for_path_not_a_device(self):
        self.probe.add_file("/dev/mapper/mpatha")

        with self.assertRaises(InvalidDevicePathError):
            find_device_for_path("/dev/mapper/mpatha", self.probe)


class TestFindDiskByPath(SasUnitTestCase):
    def setUp(self):
        super(TestFindDiskByPath, self).setUp()
        self.probe.add_link(BY_PATH_LINK, "/dev/sda")

    def test_multipath(self):
        self.probe.add_multipath("dm-1", "sda")

        self.assertEqual(find_disk_by_path(WWN, "0", self.probe, self.logger), ("/dev/sda", "/dev/dm-1"))

    def test_raw_disk(self):
        self.assertEqual(find_disk_by_path(WWN, "0", self.probe, self.logger), ("/dev/sda", ""))

    def test_wrong_lun(self):
        self.assertEqual(find_disk_by_path(WWN, "1", self.probe, self.logger), ("", ""))

    def test_invalid_wwn(self):
        self.assertEqual(find_disk_by_path("INVALIDWWN", "1", self.probe, self.logger), ("", ""))

    def test_case_sensitive(self):
        self.assertEqual(find_disk_by_path(WWN.upper(), "0", self.probe, self.logger), ("", ""))

    def test_first_match_wins(self):
        self.probe.add_link(
            "/dev/disk/by-path/pci-0000:42:00.0-sas-0x500a0981891b8dc5-lun-0", "/dev/sdb"
        )

        self.assertEqual(find_disk_by_path(WWN, "0", self.probe, self.logger), ("/dev/sda", ""))

    def test_missing_directory_is_not_found(self):
        self.probe.dirs.pop("/dev/disk/by-path")

        self.assertEqual(find_disk_by_path(WWN, "0", self.probe, self.logger), ("", ""))

    def test_read_errors_propagate(self):
        self.probe.fail("/dev/disk/by-path", errno.EACCES)

        self.assertRaises(OSError, find_disk_by_path, WWN, "0", self.probe, self.logger)

    def test_symlink_errors_propagate(self):
        self.probe.fail(BY_PATH_LINK)

        self.assertRaises(OSError, find_disk_by_path, WWN, "0", self.probe, self.logger)


class TestFindDiskByWwn(SasUnitTestCase):
    def test_multipath(self):
        self.probe.add_link("/dev/disk/by-id/wwn-0x%s" % WWN, "/dev/sda")
        self.probe.add_multipath("dm-1", "sda")

        self.assertEqual(find_disk_by_wwn(WWN, self.probe, self.logger), ("/dev/sda", "/dev/dm-1"))

    def test_raw_disk(self):
        self.probe.add_link("/dev/disk/by-id/wwn-0x%s" % WWN, "/dev/sda")

        self.assertEqual(find_disk_by_wwn(WWN, self.probe, self.logger), ("/dev/sda", ""))

    def test_invalid_wwn(self):
        self.probe.add_link("/dev/disk/by-id/wwn-0x%s" % WWN, "/dev/sda")

        self.assertEqual(find_disk_by_wwn("INVALIDWWN", self.probe, self.logger), ("", ""))

    def test_dangling_link_is_not_found(self):
        self.probe.add_link("/dev/disk/by-id/wwn-0x%s" % WWN, "/dev/sdz", dangling=True)

        self.assertEqual(find_disk_by_wwn(WWN, self.probe, self.logger), ("", ""))

    def test_broken_link_skipped_for_next_match(self):
        self.probe.add_link("/dev/disk/by-id/wwn-0x%s" % WWN, "/dev/sda")
        self.probe.add_link("/dev/disk/by-id/wwn-0x%s-part1" % WWN, "/dev/sda1")
        self.probe.fail("/dev/disk/by-id/wwn-0x%s" % WWN)

        self.assertEqual(find_disk_by_wwn(WWN, self.probe, self.logger), ("/dev/sda1", ""))


class TestFindDiskByWwid(SasUnitTestCase):
    def setUp(self):
        super(TestFindDiskByWwid, self).setUp()
        self.probe.add_link("/dev/disk/by-id/scsi-%s" % WWID, "/dev/sdb")

    def test_multipath(self):
        self.probe.add_multipath("dm-2", "sdb")

        self.assertEqual(find_disk_by_wwid(WWID, self.probe, self.logger), ("/dev/sdb", "/dev/dm-2"))

    def test_disk_without_owner_is_returned(self):
        self.assertEqual(find_disk_by_wwid(WWID, self.probe, self.logger), ("/dev/sdb", ""))

    def test_exact_name_only(self):
        self.assertEqual(find_disk_by_wwid(WWID[:-1], self.probe, self.logger), ("", ""))

    def test_invalid_wwid(self):
        self.assertEqual(find_disk_by_wwid("INVALIDWWID", self.probe, self.logger), ("", ""))

    def test_symlink_errors_propagate(self):
        self.probe.fail("/dev/disk/by-id/scsi-%s" % WWID, errno.EIO)

        self.assertRaises(OSError, find_disk_by_wwid, WWID, self.probe, self.logger)
