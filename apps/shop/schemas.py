"""
Shop Database Schema Definition
Used to render the canonical MySQL DDL with the exact constraint names
(`products_category_id_categories_id_fk`, ...) that other tooling relies on.
"""

STORE_SCHEMA = {
    "database": "storefront",
    "description": "Catalog (users, categories, products, images) and order history",
    "tables": [
        {
            "name": "users",
            "description": "Store accounts",
            "columns": [
                {"name": "id", "type": "int", "primary_key": True, "auto_increment": True},
                {"name": "name", "type": "varchar(100)"},
                {"name": "email", "type": "varchar(100)", "unique": True},
                {"name": "password", "type": "varchar(255)"},
                {"name": "role", "type": "enum('admin','customer')", "nullable": True, "default": "'customer'"},
                {"name": "image", "type": "varchar(255)", "nullable": True},
                {"name": "created_at", "type": "timestamp", "nullable": True, "default": "(now())"},
            ]
        },
        {
            "name": "categories",
            "description": "Product categories",
            "columns": [
                {"name": "id", "type": "int", "primary_key": True, "auto_increment": True},
                {"name": "name", "type": "varchar(100)", "unique": True},
                {"name": "slug", "type": "varchar(100)", "unique": True},
            ]
        },
        {
            "name": "products",
            "description": "Product catalog",
            "columns": [
                {"name": "id", "type": "int", "primary_key": True, "auto_increment": True},
                {"name": "name", "type": "varchar(100)"},
                {"name": "slug", "type": "varchar(100)", "unique": True},
                {"name": "description", "type": "text", "nullable": True},
                {"name": "price", "type": "decimal(10,2)"},
                {"name": "stock", "type": "int", "nullable": True, "default": "0"},
                {"name": "category_id", "type": "int", "foreign_key": "categories.id"},
                {"name": "height", "type": "int", "nullable": True},
                {"name": "length", "type": "int", "nullable": True},
                {"name": "weight", "type": "int", "nullable": True},
                {"name": "width", "type": "int", "nullable": True},
            ]
        },
        {
            "name": "product_images",
            "description": "Image paths per product",
            "columns": [
                {"name": "id", "type": "int", "primary_key": True, "auto_increment": True},
                {"name": "product_id", "type": "int", "foreign_key": "products.id"},
                {"name": "image", "type": "varchar(255)"},
            ]
        },
        {
            "name": "orders",
            "description": "Customer orders (append-only)",
            "columns": [
                {"name": "id", "type": "varchar(26)", "primary_key": True},
                {"name": "order_number", "type": "varchar(32)", "unique": True},
                {"name": "user_id", "type": "int", "foreign_key": "users.id"},
                {"name": "subtotal", "type": "decimal(10,2)"},
                {"name": "shipping_cost", "type": "decimal(10,2)"},
                {"name": "total", "type": "decimal(10,2)"},
                {"name": "recipient_name", "type": "varchar(100)"},
                {"name": "phone", "type": "varchar(20)"},
                {"name": "email", "type": "varchar(100)"},
                {"name": "address", "type": "varchar(255)"},
                {"name": "postal_code", "type": "varchar(10)"},
                {"name": "shipper_name", "type": "varchar(100)"},
                {"name": "shipper_phone", "type": "varchar(20)"},
                {"name": "shipper_email", "type": "varchar(100)"},
                {"name": "origin_address", "type": "varchar(255)"},
                {"name": "origin_note", "type": "varchar(255)", "nullable": True},
                {"name": "origin_postal_code", "type": "varchar(10)"},
                {"name": "courier_name", "type": "varchar(50)", "nullable": True},
                {"name": "courier_service", "type": "varchar(50)", "nullable": True},
                {"name": "courier_insurance", "type": "decimal(10,2)", "nullable": True, "default": "'0.00'"},
                {"name": "delivery_type", "type": "varchar(20)", "nullable": True},
                {"name": "order_note", "type": "varchar(255)", "nullable": True},
                {"name": "metadata", "type": "json", "nullable": True},
                {"name": "status", "type": "varchar(20)", "nullable": True, "default": "'pending'"},
                {"name": "created_at", "type": "timestamp", "nullable": True, "default": "(now())"},
            ]
        },
        {
            "name": "order_items",
            "description": "Order lines with a product snapshot taken at checkout",
            "columns": [
                {"name": "id", "type": "int", "primary_key": True, "auto_increment": True},
                {"name": "order_id", "type": "varchar(26)", "foreign_key": "orders.id"},
                {"name": "product_id", "type": "int", "foreign_key": "products.id"},
                {"name": "name", "type": "varchar(100)"},
                {"name": "description", "type": "varchar(255)", "nullable": True},
                {"name": "category", "type": "varchar(100)", "nullable": True},
                {"name": "price", "type": "decimal(10,2)"},
                {"name": "quantity", "type": "int", "check": "`quantity` > 0"},
                {"name": "height", "type": "int", "nullable": True},
                {"name": "length", "type": "int", "nullable": True},
                {"name": "weight", "type": "int", "nullable": True},
                {"name": "width", "type": "int", "nullable": True},
            ]
        },
    ],
}

STATEMENT_BREAKPOINT = "--> statement-breakpoint"


def primary_key_name(table: str) -> str:
    return f"{table}_id"


def unique_constraint_name(table: str, column: str) -> str:
    return f"{table}_{column}_unique"


def foreign_key_name(table: str, column: str, ref_table: str, ref_column: str) -> str:
    return f"{table}_{column}_{ref_table}_{ref_column}_fk"


def check_constraint_name(table: str, column: str) -> str:
    return f"{table}_{column}_positive"


def _column_ddl(col: dict) -> str:
    parts = [f"`{col['name']}`", col['type']]
    if col.get('auto_increment'):
        parts.append("AUTO_INCREMENT")
    if not col.get('nullable'):
        parts.append("NOT NULL")
    if col.get('default') is not None:
        parts.append(f"DEFAULT {col['default']}")
    return ' '.join(parts)


def _create_table(table: dict) -> str:
    name = table['name']
    lines = [_column_ddl(col) for col in table['columns']]

    pk = [c['name'] for c in table['columns'] if c.get('primary_key')]
    lines.append(f"CONSTRAINT `{primary_key_name(name)}` PRIMARY KEY(`{'`,`'.join(pk)}`)")

    for col in table['columns']:
        if col.get('unique'):
            lines.append(
                f"CONSTRAINT `{unique_constraint_name(name, col['name'])}` UNIQUE(`{col['name']}`)"
            )
        if col.get('check'):
            lines.append(
                f"CONSTRAINT `{check_constraint_name(name, col['name'])}` CHECK ({col['check']})"
            )

    body = ',\n\t'.join(lines)
    return f"CREATE TABLE `{name}` (\n\t{body}\n);"


def _add_foreign_keys(table: dict) -> list:
    statements = []
    for col in table['columns']:
        if not col.get('foreign_key'):
            continue
        ref_table, ref_column = col['foreign_key'].split('.')
        constraint = foreign_key_name(table['name'], col['name'], ref_table, ref_column)
        statements.append(
            f"ALTER TABLE `{table['name']}` ADD CONSTRAINT `{constraint}` "
            f"FOREIGN KEY (`{col['name']}`) REFERENCES `{ref_table}`(`{ref_column}`) "
            f"ON DELETE no action ON UPDATE no action;"
        )
    return statements


def render_ddl() -> str:
    """
    Render the schema as MySQL DDL: tables parent-first, then named foreign keys.
    """
    statements = [_create_table(table) for table in STORE_SCHEMA['tables']]
    for table in STORE_SCHEMA['tables']:
        statements.extend(_add_foreign_keys(table))
    return f"{STATEMENT_BREAKPOINT}\n".join(f"{stmt}\n" for stmt in statements).rstrip('\n') + '\n'
