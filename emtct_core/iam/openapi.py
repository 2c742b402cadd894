# emtct_core/iam/openapi.py
from drf_spectacular.extensions import OpenApiAuthenticationExtension


class EmailClaimJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "emtct_core.iam.auth.EmailClaimJWTAuthentication"
    name = "BearerOrCookieJWT"

    def get_security_definition(self, auto_schema):
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Send the access token via `Authorization: Bearer <token>` "
                "or via the HttpOnly cookie (emtct_access)."
            ),
        }
