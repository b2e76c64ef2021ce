# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.


import argparse
import logging
import signal
import sys
import traceback

import simplejson as json

from emf_sas import conf
from emf_sas.connector import Connector
from emf_sas.lifecycle import attach, detach
from emf_sas.log import stream_log_setup, journal_log_setup, increase_loglevel, decrease_loglevel
from emf_sas.multipath import resize_multipath_device

USAGE_EXAMPLES = """
examples:
  emf-sas attach --wwn 600c0ff000546067369fe36201000000
  emf-sas attach --target-wwn 500a0981891b8dc5 --lun 0 --volume-name vol1 --persist
  emf-sas attach --wwid 3600508b400105e210000900000490000 --detach
  emf-sas detach --connector /var/lib/emf-sas/vol1.json
  emf-sas resize --device-path /dev/dm-1

These commands write to sysfs and need root privilege.
"""


def _attach(args):
    connector = Connector(
        volume_name=args.volume_name,
        target_wwn=args.wwn,
        target_wwns=args.target_wwn,
        lun=args.lun,
        wwids=args.wwid,
    )

    if not connector.identifiers:
        raise ValueError("One of --wwn, --target-wwn or --wwid is required")

    device_path = attach(connector)

    if args.persist is not None:
        if args.persist:
            path = args.persist
        elif connector.volume_name:
            path = conf.connector_path(connector.volume_name)
        else:
            raise ValueError("--persist without a file needs --volume-name")
        connector.persist(path)

    if args.detach:
        detach(device_path)

    return connector.to_dict()


def _detach(args):
    if args.connector:
        device_path = Connector.load(args.connector).device_path
    else:
        device_path = args.device_path

    detach(device_path)

    return device_path


def _resize(args):
    resize_multipath_device(args.device_path)

    return args.device_path


def build_parser():
    parser = argparse.ArgumentParser(
        prog="emf-sas",
        description="Attach and detach SAS volumes on this node",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log scan detail")
    parser.add_argument("--journal", action="store_true", help="log to the systemd journal instead of stderr")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    p = subparsers.add_parser("attach", help="find the device for a SAS volume")
    p.add_argument("--wwn", default="", help="WWN to look up through /dev/disk/by-id")
    p.add_argument(
        "--target-wwn", action="append", default=[], help="target WWN to look up through /dev/disk/by-path"
    )
    p.add_argument("--lun", default=conf.DEFAULT_LUN, help="LUN for --target-wwn")
    p.add_argument("--wwid", action="append", default=[], help="WWID to look up through /dev/disk/by-id")
    p.add_argument("--volume-name", default="")
    p.add_argument(
        "--persist",
        nargs="?",
        const="",
        default=None,
        metavar="FILE",
        help="save the connector, to %s/<volume-name>.json if FILE is not given" % conf.DEFAULT_STATE_DIR,
    )
    p.add_argument("--detach", action="store_true", help="detach again after a successful attach")
    p.set_defaults(func=_attach)

    p = subparsers.add_parser("detach", help="remove the scsi devices of a SAS volume")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--device-path")
    group.add_argument("--connector", metavar="FILE", help="connector saved by attach --persist")
    p.set_defaults(func=_detach)

    p = subparsers.add_parser("resize", help="resize a multipath device after its paths have grown")
    p.add_argument("--device-path", required=True)
    p.set_defaults(func=_resize)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    log_setup = journal_log_setup if args.journal else stream_log_setup
    log_setup(
        console_level=logging.DEBUG if args.verbose else logging.INFO,
        daemon_level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    signal.signal(signal.SIGUSR1, decrease_loglevel)
    signal.signal(signal.SIGUSR2, increase_loglevel)

    try:
        result = args.func(args)
        print(json.dumps({"success": True, "result": result}, indent=2))
        return 0
    except SystemExit:
        raise
    except Exception:
        backtrace = "\n".join(traceback.format_exception(*sys.exc_info()))
        sys.stderr.write("%s\n" % backtrace)
        print(json.dumps({"success": False, "backtrace": backtrace}, indent=2))
        return 1


if __name__ == "__main__":
    sys.exit(main())
