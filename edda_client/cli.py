"""Argument parsing, configuration loading, and one-shot ELB queries."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from typing import Any

from .config import load_config
from .elb.client import EddaElasticLoadBalancingClient, facade_for
from .elb.models import (
    DescribeInstanceHealthRequest,
    DescribeLoadBalancerAttributesRequest,
    DescribeLoadBalancersRequest,
    Instance,
)
from .exceptions import ConfigError, EddaError
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edda-elb",
        description="Query Elastic Load Balancing state from Edda",
    )
    parser.add_argument(
        "-c", "--config",
        required=True,
        help="Path to the YAML configuration file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log at DEBUG level regardless of logging.level",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the configuration file and exit",
    )
    commands = parser.add_subparsers(dest="command")

    health = commands.add_parser("instance-health", help="Describe instance health")
    health.add_argument("--name", help="Load balancer name (default: all load balancers)")
    health.add_argument(
        "--instance", action="append", default=[], metavar="ID",
        help="Only report this instance id (repeatable, requires --name)",
    )

    lbs = commands.add_parser("load-balancers", help="Describe load balancers")
    lbs.add_argument(
        "--name", action="append", default=[], dest="names", metavar="NAME",
        help="Only report this load balancer (repeatable)",
    )

    attributes = commands.add_parser("attributes", help="Describe load balancer attributes")
    attributes.add_argument("--name", help="Load balancer name (default: all load balancers)")
    return parser


def _query(client: Any, args: argparse.Namespace) -> Any:
    if args.command == "instance-health":
        if args.name is None:
            return client.describe_all_instance_health()
        return client.describe_instance_health(DescribeInstanceHealthRequest(
            load_balancer_name=args.name,
            instances=[Instance(instance_id=i) for i in args.instance],
        ))
    if args.command == "load-balancers":
        return client.describe_load_balancers(DescribeLoadBalancersRequest(load_balancer_names=args.names))
    if args.name is None:
        return client.describe_all_load_balancer_attributes()
    return client.describe_load_balancer_attributes(
        DescribeLoadBalancerAttributesRequest(load_balancer_name=args.name)
    )


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, list):
        return [dataclasses.asdict(r) for r in result]
    return dataclasses.asdict(result)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    configure_logging(config.logging, level="DEBUG" if args.verbose else None)

    if args.validate:
        logger.info("Configuration is valid")
        return 0

    if args.command is None:
        parser.print_usage(sys.stderr)
        return 2

    if args.command == "instance-health" and args.instance and args.name is None:
        print("--instance requires --name", file=sys.stderr)
        return 2

    try:
        with EddaElasticLoadBalancingClient(config.edda) as client:
            result = _query(facade_for(client, config), args)
    except EddaError as exc:
        logger.error("Query failed: %s", exc)
        return 1

    json.dump(_to_jsonable(result), sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
