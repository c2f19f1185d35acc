"""Tests for the Edda-backed ELB client."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
import responses

from edda_client.config import EddaConfig
from edda_client.elb.client import EddaElasticLoadBalancingClient
from edda_client.elb.models import (
    DescribeInstanceHealthRequest,
    DescribeLoadBalancerAttributesRequest,
    DescribeLoadBalancersRequest,
    Instance,
)
from edda_client.exceptions import EddaClientError, EddaServiceError, InvalidParameterValue

BASE = "http://edda:7001/edda"
INSTANCES = f"{BASE}/api/v2/view/loadBalancerInstances"
ATTRIBUTES = f"{BASE}/api/v2/view/loadBalancerAttributes"
LOAD_BALANCERS = f"{BASE}/api/v2/aws/loadBalancers;_expand"

START = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def client():
    return EddaElasticLoadBalancingClient(EddaConfig(url=BASE))


@pytest.fixture
def fixed_clock():
    with patch("edda_client.rest_client._utcnow", return_value=START):
        yield START


def _states(*ids: str) -> list[dict]:
    return [{"instanceId": i, "state": "InService"} for i in ids]


class TestDescribeAllInstanceHealth:
    @responses.activate
    def test_one_named_result_per_view(self, client, fixed_clock):
        responses.add(responses.GET, f"{INSTANCES};_expand", json=[
            {"name": "lb-a", "instances": _states("i-1", "i-2")},
            {"name": "lb-b", "instances": _states("i-3")},
        ])
        results = client.describe_all_instance_health()
        assert [r.name for r in results] == ["lb-a", "lb-b"]
        assert [s.instance_id for s in results[0].result.instance_states] == ["i-1", "i-2"]
        assert all(r.start_time == fixed_clock for r in results)

    @responses.activate
    def test_empty_list(self, client):
        responses.add(responses.GET, f"{INSTANCES};_expand", json=[])
        assert client.describe_all_instance_health() == []

    @responses.activate
    def test_object_instead_of_list_raises(self, client):
        url = f"{INSTANCES};_expand"
        responses.add(responses.GET, url, json={"name": "lb-a", "instances": []})
        with pytest.raises(EddaClientError, match="Failed to parse"):
            client.describe_all_instance_health()


class TestDescribeInstanceHealth:
    @responses.activate
    def test_no_instances_returns_all(self, client, fixed_clock):
        responses.add(responses.GET, f"{INSTANCES}/lb-a;_expand", json={
            "name": "lb-a", "instances": _states("i-1", "i-2", "i-3"),
        })
        sr = client.describe_instance_health(DescribeInstanceHealthRequest(load_balancer_name="lb-a"))
        assert [s.instance_id for s in sr.result.instance_states] == ["i-1", "i-2", "i-3"]
        assert sr.start_time == fixed_clock

    @responses.activate
    def test_filters_by_instance_ids_preserving_order(self, client):
        responses.add(responses.GET, f"{INSTANCES}/lb-a;_expand", json={
            "name": "lb-a", "instances": _states("i-1", "i-2", "i-3", "i-4"),
        })
        request = DescribeInstanceHealthRequest(
            load_balancer_name="lb-a",
            instances=[Instance("i-4"), Instance("i-2"), Instance("i-missing")],
        )
        sr = client.describe_instance_health(request)
        assert [s.instance_id for s in sr.result.instance_states] == ["i-2", "i-4"]

    @pytest.mark.parametrize("name", [None, ""])
    def test_empty_name_rejected_before_request(self, client, name):
        with patch.object(client, "do_get") as do_get:
            with pytest.raises(InvalidParameterValue) as exc_info:
                client.describe_instance_health(DescribeInstanceHealthRequest(load_balancer_name=name))
        assert exc_info.value.error_code == "InvalidParameterValue"
        assert exc_info.value.parameter == "LoadBalancerName"
        do_get.assert_not_called()

    @responses.activate
    def test_name_is_url_encoded(self, client):
        responses.add(responses.GET, f"{INSTANCES}/lb%2Fodd;_expand", json={"name": "lb/odd", "instances": []})
        sr = client.describe_instance_health(DescribeInstanceHealthRequest(load_balancer_name="lb/odd"))
        assert sr.result.instance_states == []

    @responses.activate
    def test_unknown_load_balancer(self, client):
        responses.add(responses.GET, f"{INSTANCES}/nope;_expand", json={"message": "not found"}, status=404)
        with pytest.raises(EddaServiceError) as exc_info:
            client.describe_instance_health(DescribeInstanceHealthRequest(load_balancer_name="nope"))
        assert exc_info.value.status_code == 404

    @responses.activate
    def test_malformed_json_raises_client_error(self, client):
        url = f"{INSTANCES}/lb-a;_expand"
        responses.add(responses.GET, url, body="<html>oops</html>")
        with pytest.raises(EddaClientError, match="Failed to parse") as exc_info:
            client.describe_instance_health(DescribeInstanceHealthRequest(load_balancer_name="lb-a"))
        assert url in str(exc_info.value)
        assert exc_info.value.__cause__ is not None


class TestDescribeLoadBalancers:
    @responses.activate
    def test_all_load_balancers(self, client, fixed_clock):
        responses.add(responses.GET, LOAD_BALANCERS, json=[
            {"loadBalancerName": "lb-a"}, {"loadBalancerName": "lb-b"},
        ])
        sr = client.describe_load_balancers()
        names = [d.load_balancer_name for d in sr.result.load_balancer_descriptions]
        assert names == ["lb-a", "lb-b"]
        assert sr.next_token is None
        assert sr.start_time == fixed_clock

    @responses.activate
    def test_empty_names_returns_all(self, client):
        responses.add(responses.GET, LOAD_BALANCERS, json=[
            {"loadBalancerName": "lb-a"}, {"loadBalancerName": "lb-b"},
        ])
        sr = client.describe_load_balancers(DescribeLoadBalancersRequest(load_balancer_names=[]))
        assert len(sr.result.load_balancer_descriptions) == 2

    @responses.activate
    def test_filters_by_names_preserving_order(self, client):
        responses.add(responses.GET, LOAD_BALANCERS, json=[
            {"loadBalancerName": "lb-a"}, {"loadBalancerName": "lb-b"}, {"loadBalancerName": "lb-c"},
        ])
        sr = client.describe_load_balancers(DescribeLoadBalancersRequest(load_balancer_names=["lb-c", "lb-a"]))
        names = [d.load_balancer_name for d in sr.result.load_balancer_descriptions]
        assert names == ["lb-a", "lb-c"]

    @responses.activate
    def test_description_without_name_raises(self, client):
        responses.add(responses.GET, LOAD_BALANCERS, json=[{"DNSName": "x"}])
        with pytest.raises(EddaClientError, match="loadBalancers"):
            client.describe_load_balancers()


class TestDescribeLoadBalancerAttributes:
    @responses.activate
    def test_all_attributes(self, client, fixed_clock):
        responses.add(responses.GET, f"{ATTRIBUTES};_expand", json=[
            {"name": "lb-a", "attributes": {"crossZoneLoadBalancing": {"enabled": True}}},
            {"name": "lb-b", "attributes": {"connectionDraining": {"enabled": True, "timeout": 30}}},
        ])
        results = client.describe_all_load_balancer_attributes()
        assert [r.name for r in results] == ["lb-a", "lb-b"]
        assert results[0].result.load_balancer_attributes.cross_zone_load_balancing.enabled is True
        assert results[1].result.load_balancer_attributes.connection_draining.timeout == 30
        assert all(r.start_time == fixed_clock for r in results)

    @responses.activate
    def test_single_load_balancer(self, client, fixed_clock):
        responses.add(responses.GET, f"{ATTRIBUTES}/lb-a;_expand", json={
            "name": "lb-a", "attributes": {"connectionSettings": {"idleTimeout": 120}},
        })
        sr = client.describe_load_balancer_attributes(
            DescribeLoadBalancerAttributesRequest(load_balancer_name="lb-a")
        )
        assert sr.result.load_balancer_attributes.connection_settings.idle_timeout == 120
        assert sr.start_time == fixed_clock

    def test_empty_name_rejected_before_request(self, client):
        with patch.object(client, "do_get") as do_get:
            with pytest.raises(InvalidParameterValue):
                client.describe_load_balancer_attributes(DescribeLoadBalancerAttributesRequest())
        do_get.assert_not_called()


class TestContextManager:
    def test_closes_session(self):
        with patch("edda_client.rest_client.requests.Session") as MockSession:
            with EddaElasticLoadBalancingClient(EddaConfig(url=BASE)):
                pass
        MockSession.return_value.close.assert_called_once()


class TestAttributeFlags:
    @responses.activate
    def test_non_boolean_flag_is_a_parse_error(self, client):
        responses.add(responses.GET, f"{ATTRIBUTES}/lb-a;_expand", json={
            "name": "lb-a", "attributes": {"crossZoneLoadBalancing": {"enabled": "false"}},
        })
        with pytest.raises(EddaClientError, match="Failed to parse"):
            client.describe_load_balancer_attributes(
                DescribeLoadBalancerAttributesRequest(load_balancer_name="lb-a")
            )
