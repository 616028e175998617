"""Global variables."""

OPENAPI_TAGS = [
    {
        "name": "Inventory Items",
        "description": "Inventory items feeding the expiry calendar",
    },
    {
        "name": "Calendar",
        "description": (
            "Expiry calendar aggregates, legend counts"
            " and virtualized item windows"
        ),
    },
    {
        "name": "Health",
        "description": "Application health check endpoints",
    },
]
