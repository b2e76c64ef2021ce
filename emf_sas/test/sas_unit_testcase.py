# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.


import logging
import unittest

import mock

from emf_sas.test.fake_host_probe import FakeHostProbe


class SasUnitTestCase(unittest.TestCase):
    def setUp(self):
        super(SasUnitTestCase, self).setUp()

        self.probe = FakeHostProbe()
        self.logger = logging.getLogger("emf_sas.test")

        self.addCleanup(mock.patch.stopall)
