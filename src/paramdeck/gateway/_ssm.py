# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""AWS Systems Manager Parameter Store gateway.

Maps the three gateway operations directly onto SSM API calls:
``DescribeParameters`` (paginated), ``GetParameter`` with decryption and
``PutParameter`` with overwrite.
"""

# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false
# pyright: reportUnknownArgumentType=false, reportTypedDictNotRequiredAccess=false

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import GatewayError
from ..logging import StructuredLogger, get_logger
from ..models import Parameter, ParameterType

if TYPE_CHECKING:
    from mypy_boto3_ssm import SSMClient

# DescribeParameters rejects larger pages.
_PAGE_SIZE = 50

logger: StructuredLogger = get_logger(__name__, context={"component": "gateway"})


@dataclass(slots=True)
class SSMParameterGateway:
    """Parameter gateway backed by a boto3 SSM client.

    The region is latched into the client at creation time; switching region
    means creating a new gateway.

    Example::

        gateway = SSMParameterGateway.connect("staging", "eu-central-1")
        for parameter in gateway.list_parameters():
            print(parameter.name)
    """

    profile: str
    region: str
    client: SSMClient = field(repr=False)

    @classmethod
    def connect(cls, profile: str, region: str) -> SSMParameterGateway:
        """Build a client from the shared AWS config for ``profile``.

        The ``default`` profile uses the ambient credential chain.

        Raises:
            GatewayError: the profile is unknown or the config is unreadable.
        """

        try:
            session = boto3.Session(
                profile_name=None if profile == "default" else profile,
                region_name=region or None,
            )
            client = session.client("ssm")
        except BotoCoreError as exc:
            raise GatewayError(
                f"failed to load AWS config for profile {profile}: {exc}",
                operation="connect",
                profile=profile,
                region=region,
            ) from exc
        logger.debug(
            "Created SSM client.",
            event="gateway.connected",
            context={"profile": profile, "region": region},
        )
        return cls(profile=profile, region=region, client=client)

    def list_parameters(self) -> Sequence[Parameter]:
        parameters: list[Parameter] = []
        try:
            paginator = self.client.get_paginator("describe_parameters")
            for page in paginator.paginate(PaginationConfig={"PageSize": _PAGE_SIZE}):
                parameters.extend(_from_metadata(item) for item in page["Parameters"])
        except (BotoCoreError, ClientError) as exc:
            raise self._error("list", f"failed to describe parameters: {exc}") from exc
        return parameters

    def get_parameter(self, name: str) -> Parameter:
        try:
            response = self.client.get_parameter(Name=name, WithDecryption=True)
        except (BotoCoreError, ClientError) as exc:
            raise self._error(
                "get", f"failed to get parameter {name}: {exc}", name=name
            ) from exc
        return _from_metadata(response["Parameter"])

    def put_parameter(self, name: str, value: str, type: ParameterType) -> None:
        try:
            _ = self.client.put_parameter(
                Name=name,
                Value=value,
                Type=type.value,
                Overwrite=True,
            )
        except (BotoCoreError, ClientError) as exc:
            raise self._error(
                "put", f"failed to put parameter {name}: {exc}", name=name
            ) from exc

    def _error(self, operation: str, message: str, *, name: str | None = None) -> GatewayError:
        return GatewayError(
            message,
            operation=operation,
            profile=self.profile,
            region=self.region,
            name=name,
        )


def _from_metadata(item: Mapping[str, Any]) -> Parameter:
    """Build a :class:`Parameter` from a ``ParameterMetadata`` or ``Parameter`` shape."""

    raw_type = item.get("Type", ParameterType.STRING.value)
    try:
        parameter_type = ParameterType(raw_type)
    except ValueError:
        parameter_type = ParameterType.STRING
    return Parameter(
        name=item.get("Name", ""),
        type=parameter_type,
        value=item.get("Value", ""),
        arn=item.get("ARN", ""),
        version=int(item.get("Version", 0)),
        last_modified=item.get("LastModifiedDate"),
        data_type=item.get("DataType", ""),
    )


def connect_ssm(profile: str, region: str) -> SSMParameterGateway:
    """Gateway factory suitable for the orchestrator."""

    return SSMParameterGateway.connect(profile, region)


__all__ = ["SSMParameterGateway", "connect_ssm"]
