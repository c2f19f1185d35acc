"""Elastic Load Balancing client backed by Edda."""

from .client import EddaElasticLoadBalancingClient, build_elb_client
from .models import (
    DescribeInstanceHealthRequest,
    DescribeLoadBalancerAttributesRequest,
    DescribeLoadBalancersRequest,
    Instance,
)

__all__ = [
    "EddaElasticLoadBalancingClient",
    "build_elb_client",
    "facade_for",
    "DescribeInstanceHealthRequest",
    "DescribeLoadBalancerAttributesRequest",
    "DescribeLoadBalancersRequest",
    "Instance",
]
