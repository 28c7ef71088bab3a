X_COMPANY = "X-Company"

# Endpoints reachable without a company context
PUBLIC_PATH_PREFIXES = (
    "/api/auth/",
    "/api/companies/register/",
    "/api/billing/plans/",
    "/api/schema/",
)


def add_x_company_parameter(result, generator, request, public):
    """Document the X-Company header on every company-scoped operation."""
    components = result.setdefault("components", {}).setdefault("parameters", {})
    components[X_COMPANY] = {
        "name": X_COMPANY,
        "in": "header",
        "required": False,
        "description": (
            "Company slug. Members may omit it (their own company is used); "
            "superusers without a company use it to pick the company to act on."
        ),
        "schema": {"type": "string"},
    }
    ref = {"$ref": f"#/components/parameters/{X_COMPANY}"}

    for path, path_item in result.get("paths", {}).items():
        if path.startswith(PUBLIC_PATH_PREFIXES):
            continue
        for operation in path_item.values():
            if not isinstance(operation, dict):
                continue
            params = operation.setdefault("parameters", [])
            if ref not in params and not any(p.get("name") == X_COMPANY for p in params):
                params.append(ref)

    return result
