from __future__ import annotations

from pydantic import Field

from .base import Endpoint, NomadModel, escape
from .options import QueryOptions, WriteOptions


class JobACL(NomadModel):
    """Scopes a policy to a job, group or task workload identity."""

    namespace: str = ""
    job_id: str = Field(default="", alias="JobID")
    group: str = ""
    task: str = ""


class ACLPolicy(NomadModel):
    """An ACL policy and its HCL rules.

    Attributes:
        name: The policy name.
        rules: The policy rules in HCL format.
        description: Human readable description.
        job_acl: Optional workload identity the policy is attached to.
    """

    name: str
    rules: str = ""
    description: str | None = None
    job_acl: JobACL | None = Field(default=None, alias="JobACL")
    create_index: int | None = None
    modify_index: int | None = None


class ACLPolicyStub(NomadModel):
    name: str
    description: str | None = None
    job_acl: JobACL | None = Field(default=None, alias="JobACL")
    create_index: int | None = None
    modify_index: int | None = None


class ACLPolicyEndpoint(Endpoint):
    async def create(self, policy: ACLPolicy, opts: WriteOptions | None = None) -> None:
        """Creates an ACL policy.

        Submitting a policy with the name of an existing one updates it.

        Args:
            policy: The ACL policy to create.
            opts: Optional write options for the request.
        """
        await self._client.request(
            "POST", f"/v1/acl/policy/{escape(policy.name)}", opts=opts, body=policy
        )

    async def delete(self, name: str, opts: WriteOptions | None = None) -> None:
        await self._client.request(
            "DELETE", f"/v1/acl/policy/{escape(name)}", opts=opts
        )

    async def get(self, name: str, opts: QueryOptions | None = None) -> ACLPolicy:
        return await self._client.request(
            "GET", f"/v1/acl/policy/{escape(name)}", ACLPolicy, opts=opts
        )

    async def get_self(self, opts: QueryOptions | None = None) -> list[ACLPolicyStub]:
        """Lists the policies attached to the token used for the request."""
        return await self._client.request(
            "GET", "/v1/acl/policy/self", list[ACLPolicyStub], opts=opts
        )

    async def list(self, opts: QueryOptions | None = None) -> list[ACLPolicyStub]:
        return await self._client.request(
            "GET", "/v1/acl/policies", list[ACLPolicyStub], opts=opts
        )
