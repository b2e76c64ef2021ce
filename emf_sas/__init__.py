# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.

__version__ = "1.0.0"
__package_version__ = __version__
__build__ = 1
__is_release__ = False


def package_version():
    return __package_version__
