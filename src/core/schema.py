"""OpenAPI description of the bearer-token authentication bridge."""

from drf_spectacular.extensions import OpenApiAuthenticationExtension
from drf_spectacular.plumbing import build_bearer_security_scheme_object


class MiddlewareUserAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "core.authentication.MiddlewareUserAuthentication"
    name = "bearerAuth"

    def get_security_definition(self, auto_schema):
        return build_bearer_security_scheme_object(
            header_name="AUTHORIZATION",
            token_prefix="Bearer",
            bearer_format="JWT",
        )
