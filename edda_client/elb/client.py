"""Elastic Load Balancing reads served from Edda views."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from ..aws_client import EddaAwsClient, build_aws_client
from ..config import AppConfig, AWSConfig
from ..results import NamedServiceResult, PaginatedServiceResult, ServiceResult
from .models import (
    DescribeInstanceHealthRequest,
    DescribeInstanceHealthResult,
    DescribeLoadBalancerAttributesRequest,
    DescribeLoadBalancerAttributesResult,
    DescribeLoadBalancersRequest,
    DescribeLoadBalancersResult,
    InstanceStateView,
    LoadBalancerAttributesView,
    LoadBalancerDescription,
)

logger = logging.getLogger(__name__)

INSTANCES_VIEW = "/api/v2/view/loadBalancerInstances"
ATTRIBUTES_VIEW = "/api/v2/view/loadBalancerAttributes"
LOAD_BALANCERS = "/api/v2/aws/loadBalancers"
EXPAND = ";_expand"


def _list_of(loader):
    def _load(raw: Any) -> list:
        if not isinstance(raw, list):
            raise ValueError(f"expected a JSON list, got {type(raw).__name__}")
        return [loader(item) for item in raw]

    return _load


class EddaElasticLoadBalancingClient(EddaAwsClient):
    """Answers the ELB describe calls from Edda instead of the AWS API."""

    OPERATIONS = (
        "describe_all_instance_health",
        "describe_instance_health",
        "describe_load_balancers",
        "describe_all_load_balancer_attributes",
        "describe_load_balancer_attributes",
    )

    # ── Instance health ─────────────────────────────────────────────

    def describe_all_instance_health(self) -> list[NamedServiceResult[DescribeInstanceHealthResult]]:
        """Instance health for every load balancer, one named result each."""
        url = self.url(INSTANCES_VIEW + EXPAND)
        sr = self.do_get(url)
        views = self.parse(url, sr.content, _list_of(InstanceStateView.from_dict))
        logger.info("Fetched instance health", extra={"url": url, "record_count": len(views)})
        return [
            NamedServiceResult(
                start_time=sr.start_time,
                name=view.name,
                result=DescribeInstanceHealthResult(instance_states=view.instances),
            )
            for view in views
        ]

    def describe_instance_health(
        self, request: DescribeInstanceHealthRequest
    ) -> ServiceResult[DescribeInstanceHealthResult]:
        """Instance health for one load balancer, optionally narrowed to ``request.instances``."""
        self.validate_not_empty("LoadBalancerName", request.load_balancer_name)
        name = request.load_balancer_name

        url = self.url(f"{INSTANCES_VIEW}/{quote(name, safe='')}{EXPAND}")
        sr = self.do_get(url)
        view = self.parse(url, sr.content, InstanceStateView.from_dict)

        instance_states = view.instances
        ids = [i.instance_id for i in request.instances or []]
        if self.should_filter(ids):
            instance_states = [s for s in instance_states if self.matches(ids, s.instance_id)]

        logger.debug(
            "Instance health for %s: %d of %d instances", name, len(instance_states), len(view.instances),
            extra={"load_balancer": name, "record_count": len(instance_states), "filtered": bool(ids)},
        )
        return ServiceResult(
            start_time=sr.start_time,
            result=DescribeInstanceHealthResult(instance_states=instance_states),
        )

    # ── Load balancers ──────────────────────────────────────────────

    def describe_load_balancers(
        self, request: DescribeLoadBalancersRequest | None = None
    ) -> PaginatedServiceResult[DescribeLoadBalancersResult]:
        """All load balancer descriptions, or only those named in ``request.load_balancer_names``.

        Edda returns everything in one response, so ``next_token`` is always None.
        """
        request = request or DescribeLoadBalancersRequest()
        url = self.url(LOAD_BALANCERS + EXPAND)
        sr = self.do_get(url)
        descriptions = self.parse(url, sr.content, _list_of(LoadBalancerDescription.from_dict))

        names = request.load_balancer_names
        if self.should_filter(names):
            descriptions = [d for d in descriptions if self.matches(names, d.load_balancer_name)]

        logger.info(
            "Fetched load balancers",
            extra={"url": url, "record_count": len(descriptions), "filtered": bool(names)},
        )
        return PaginatedServiceResult(
            start_time=sr.start_time,
            next_token=None,
            result=DescribeLoadBalancersResult(load_balancer_descriptions=descriptions),
        )

    # ── Attributes ──────────────────────────────────────────────────

    def describe_all_load_balancer_attributes(
        self,
    ) -> list[NamedServiceResult[DescribeLoadBalancerAttributesResult]]:
        url = self.url(ATTRIBUTES_VIEW + EXPAND)
        sr = self.do_get(url)
        views = self.parse(url, sr.content, _list_of(LoadBalancerAttributesView.from_dict))
        logger.info("Fetched load balancer attributes", extra={"url": url, "record_count": len(views)})
        return [
            NamedServiceResult(
                start_time=sr.start_time,
                name=view.name,
                result=DescribeLoadBalancerAttributesResult(load_balancer_attributes=view.attributes),
            )
            for view in views
        ]

    def describe_load_balancer_attributes(
        self, request: DescribeLoadBalancerAttributesRequest
    ) -> ServiceResult[DescribeLoadBalancerAttributesResult]:
        self.validate_not_empty("LoadBalancerName", request.load_balancer_name)
        name = request.load_balancer_name

        url = self.url(f"{ATTRIBUTES_VIEW}/{quote(name, safe='')}{EXPAND}")
        sr = self.do_get(url)
        view = self.parse(url, sr.content, LoadBalancerAttributesView.from_dict)
        return ServiceResult(
            start_time=sr.start_time,
            result=DescribeLoadBalancerAttributesResult(load_balancer_attributes=view.attributes),
        )


def build_elb_client(aws_config: AWSConfig) -> Any:
    """A boto3 Classic ELB client suitable for ``wrap_aws_client``."""
    return build_aws_client("elb", aws_config)


def facade_for(client: EddaElasticLoadBalancingClient, config: AppConfig) -> Any:
    """Reads go to Edda; with an ``aws`` section everything else goes to a boto3 ELB client."""
    if config.aws is not None:
        return client.wrap_aws_client(build_elb_client(config.aws))
    return client.read_only()
