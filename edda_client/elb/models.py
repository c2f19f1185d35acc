"""SDK-shaped Elastic Load Balancing types and the Edda views that carry them.

Edda serializes AWS SDK beans with their bean property names, so keys are
mostly camelCase with a few upper-case acronyms (``DNSName``, ``VPCId``).
Each ``from_dict`` raises KeyError/TypeError/ValueError on malformed input;
the client turns those into EddaClientError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _as_list(raw: Any, what: str) -> list:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"{what} must be a list, got {type(raw).__name__}")
    return raw


def _as_dict(raw: Any, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ValueError(f"{what} must be an object, got {type(raw).__name__}")
    return raw


def _opt_dict(raw: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = raw.get(key)
    return _as_dict(value, key) if value is not None else None


def _dicts(raw: dict[str, Any], key: str) -> list[dict[str, Any]]:
    return [_as_dict(item, key) for item in _as_list(raw.get(key), key)]


def _opt_bool(raw: dict[str, Any], key: str) -> bool | None:
    value = raw.get(key)
    if value is not None and not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean, got {value!r}")
    return value


def _parse_time(raw: Any) -> datetime | None:
    """Edda emits epoch milliseconds; ISO-8601 strings are accepted too."""
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
    if isinstance(raw, str):
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise ValueError(f"Unrecognized timestamp: {raw!r}")


# ── Instances ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Instance:
    instance_id: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Instance:
        return cls(instance_id=_as_dict(raw, "instance")["instanceId"])


@dataclass(frozen=True)
class InstanceState:
    """Health of one instance as seen by its load balancer."""

    instance_id: str
    state: str | None = None  # "InService", "OutOfService", "Unknown"
    reason_code: str | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> InstanceState:
        raw = _as_dict(raw, "instance state")
        return cls(
            instance_id=raw["instanceId"],
            state=raw.get("state"),
            reason_code=raw.get("reasonCode"),
            description=raw.get("description"),
        )


# ── Load balancer descriptions ──────────────────────────────────────


@dataclass(frozen=True)
class Listener:
    protocol: str | None = None
    load_balancer_port: int | None = None
    instance_protocol: str | None = None
    instance_port: int | None = None
    ssl_certificate_id: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Listener:
        raw = _as_dict(raw, "listener")
        return cls(
            protocol=raw.get("protocol"),
            load_balancer_port=raw.get("loadBalancerPort"),
            instance_protocol=raw.get("instanceProtocol"),
            instance_port=raw.get("instancePort"),
            ssl_certificate_id=raw.get("SSLCertificateId"),
        )


@dataclass(frozen=True)
class ListenerDescription:
    listener: Listener | None = None
    policy_names: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ListenerDescription:
        raw = _as_dict(raw, "listener description")
        listener = raw.get("listener")
        return cls(
            listener=Listener.from_dict(listener) if listener is not None else None,
            policy_names=list(_as_list(raw.get("policyNames"), "policyNames")),
        )


@dataclass(frozen=True)
class HealthCheck:
    target: str | None = None
    interval: int | None = None
    timeout: int | None = None
    unhealthy_threshold: int | None = None
    healthy_threshold: int | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> HealthCheck:
        raw = _as_dict(raw, "health check")
        return cls(
            target=raw.get("target"),
            interval=raw.get("interval"),
            timeout=raw.get("timeout"),
            unhealthy_threshold=raw.get("unhealthyThreshold"),
            healthy_threshold=raw.get("healthyThreshold"),
        )


@dataclass(frozen=True)
class SourceSecurityGroup:
    owner_alias: str | None = None
    group_name: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SourceSecurityGroup:
        raw = _as_dict(raw, "source security group")
        return cls(owner_alias=raw.get("ownerAlias"), group_name=raw.get("groupName"))


@dataclass(frozen=True)
class AppCookieStickinessPolicy:
    policy_name: str | None = None
    cookie_name: str | None = None


@dataclass(frozen=True)
class LBCookieStickinessPolicy:
    policy_name: str | None = None
    cookie_expiration_period: int | None = None


@dataclass(frozen=True)
class Policies:
    app_cookie_stickiness_policies: list[AppCookieStickinessPolicy] = field(default_factory=list)
    lb_cookie_stickiness_policies: list[LBCookieStickinessPolicy] = field(default_factory=list)
    other_policies: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Policies:
        raw = _as_dict(raw, "policies")
        return cls(
            app_cookie_stickiness_policies=[
                AppCookieStickinessPolicy(policy_name=p.get("policyName"), cookie_name=p.get("cookieName"))
                for p in _dicts(raw, "appCookieStickinessPolicies")
            ],
            lb_cookie_stickiness_policies=[
                LBCookieStickinessPolicy(
                    policy_name=p.get("policyName"),
                    cookie_expiration_period=p.get("cookieExpirationPeriod"),
                )
                for p in _dicts(raw, "LBCookieStickinessPolicies")
            ],
            other_policies=list(_as_list(raw.get("otherPolicies"), "otherPolicies")),
        )


@dataclass(frozen=True)
class LoadBalancerDescription:
    load_balancer_name: str
    dns_name: str | None = None
    canonical_hosted_zone_name: str | None = None
    canonical_hosted_zone_name_id: str | None = None
    listener_descriptions: list[ListenerDescription] = field(default_factory=list)
    policies: Policies | None = None
    availability_zones: list[str] = field(default_factory=list)
    subnets: list[str] = field(default_factory=list)
    vpc_id: str | None = None
    instances: list[Instance] = field(default_factory=list)
    health_check: HealthCheck | None = None
    source_security_group: SourceSecurityGroup | None = None
    security_groups: list[str] = field(default_factory=list)
    created_time: datetime | None = None
    scheme: str | None = None  # "internet-facing" or "internal"

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> LoadBalancerDescription:
        raw = _as_dict(raw, "load balancer description")
        policies = raw.get("policies")
        health_check = raw.get("healthCheck")
        source_group = raw.get("sourceSecurityGroup")
        return cls(
            load_balancer_name=raw["loadBalancerName"],
            dns_name=raw.get("DNSName"),
            canonical_hosted_zone_name=raw.get("canonicalHostedZoneName"),
            canonical_hosted_zone_name_id=raw.get("canonicalHostedZoneNameID"),
            listener_descriptions=[
                ListenerDescription.from_dict(d)
                for d in _as_list(raw.get("listenerDescriptions"), "listenerDescriptions")
            ],
            policies=Policies.from_dict(policies) if policies is not None else None,
            availability_zones=list(_as_list(raw.get("availabilityZones"), "availabilityZones")),
            subnets=list(_as_list(raw.get("subnets"), "subnets")),
            vpc_id=raw.get("VPCId"),
            instances=[Instance.from_dict(i) for i in _as_list(raw.get("instances"), "instances")],
            health_check=HealthCheck.from_dict(health_check) if health_check is not None else None,
            source_security_group=(
                SourceSecurityGroup.from_dict(source_group) if source_group is not None else None
            ),
            security_groups=list(_as_list(raw.get("securityGroups"), "securityGroups")),
            created_time=_parse_time(raw.get("createdTime")),
            scheme=raw.get("scheme"),
        )


# ── Load balancer attributes ────────────────────────────────────────


@dataclass(frozen=True)
class CrossZoneLoadBalancing:
    enabled: bool | None = None


@dataclass(frozen=True)
class AccessLog:
    enabled: bool | None = None
    s3_bucket_name: str | None = None
    emit_interval: int | None = None
    s3_bucket_prefix: str | None = None


@dataclass(frozen=True)
class ConnectionDraining:
    enabled: bool | None = None
    timeout: int | None = None


@dataclass(frozen=True)
class ConnectionSettings:
    idle_timeout: int | None = None


@dataclass(frozen=True)
class AdditionalAttribute:
    key: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class LoadBalancerAttributes:
    cross_zone_load_balancing: CrossZoneLoadBalancing | None = None
    access_log: AccessLog | None = None
    connection_draining: ConnectionDraining | None = None
    connection_settings: ConnectionSettings | None = None
    additional_attributes: list[AdditionalAttribute] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> LoadBalancerAttributes:
        raw = _as_dict(raw, "load balancer attributes")
        cross_zone = _opt_dict(raw, "crossZoneLoadBalancing")
        access_log = _opt_dict(raw, "accessLog")
        draining = _opt_dict(raw, "connectionDraining")
        settings = _opt_dict(raw, "connectionSettings")
        return cls(
            cross_zone_load_balancing=(
                CrossZoneLoadBalancing(enabled=_opt_bool(cross_zone, "enabled"))
                if cross_zone is not None else None
            ),
            access_log=(
                AccessLog(
                    enabled=_opt_bool(access_log, "enabled"),
                    s3_bucket_name=access_log.get("s3BucketName"),
                    emit_interval=access_log.get("emitInterval"),
                    s3_bucket_prefix=access_log.get("s3BucketPrefix"),
                )
                if access_log is not None else None
            ),
            connection_draining=(
                ConnectionDraining(enabled=_opt_bool(draining, "enabled"), timeout=draining.get("timeout"))
                if draining is not None else None
            ),
            connection_settings=(
                ConnectionSettings(idle_timeout=settings.get("idleTimeout"))
                if settings is not None else None
            ),
            additional_attributes=[
                AdditionalAttribute(key=a.get("key"), value=a.get("value"))
                for a in _dicts(raw, "additionalAttributes")
            ],
        )


# ── Edda views ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class InstanceStateView:
    """The loadBalancerInstances view: one load balancer and its instance states."""

    name: str
    instances: list[InstanceState] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> InstanceStateView:
        raw = _as_dict(raw, "instance state view")
        return cls(
            name=raw["name"],
            instances=[InstanceState.from_dict(i) for i in _as_list(raw.get("instances"), "instances")],
        )


@dataclass(frozen=True)
class LoadBalancerAttributesView:
    """The loadBalancerAttributes view: one load balancer and its attributes."""

    name: str
    attributes: LoadBalancerAttributes = field(default_factory=LoadBalancerAttributes)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> LoadBalancerAttributesView:
        raw = _as_dict(raw, "load balancer attributes view")
        attributes = raw.get("attributes")
        return cls(
            name=raw["name"],
            attributes=(
                LoadBalancerAttributes.from_dict(attributes)
                if attributes is not None else LoadBalancerAttributes()
            ),
        )


# ── Requests and results ────────────────────────────────────────────


@dataclass(frozen=True)
class DescribeInstanceHealthRequest:
    load_balancer_name: str | None = None
    instances: list[Instance] = field(default_factory=list)


@dataclass(frozen=True)
class DescribeLoadBalancersRequest:
    load_balancer_names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DescribeLoadBalancerAttributesRequest:
    load_balancer_name: str | None = None


@dataclass(frozen=True)
class DescribeInstanceHealthResult:
    instance_states: list[InstanceState] = field(default_factory=list)


@dataclass(frozen=True)
class DescribeLoadBalancersResult:
    load_balancer_descriptions: list[LoadBalancerDescription] = field(default_factory=list)
    next_marker: str | None = None


@dataclass(frozen=True)
class DescribeLoadBalancerAttributesResult:
    load_balancer_attributes: LoadBalancerAttributes = field(default_factory=LoadBalancerAttributes)
