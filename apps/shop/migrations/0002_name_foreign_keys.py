"""
Give the foreign keys the constraint names used by the existing MySQL schema.

Django generates hashed FK names; PostgreSQL and MySQL databases shared with
other tooling expect e.g. `products_category_id_categories_id_fk`. SQLite FKs
are unnamed, so nothing happens there.
"""
from django.db import migrations

FOREIGN_KEY_NAMES = {
    ('products', 'category_id'): 'products_category_id_categories_id_fk',
    ('product_images', 'product_id'): 'product_images_product_id_products_id_fk',
    ('orders', 'user_id'): 'orders_user_id_users_id_fk',
    ('order_items', 'order_id'): 'order_items_order_id_orders_id_fk',
    ('order_items', 'product_id'): 'order_items_product_id_products_id_fk',
}


def _generated_foreign_keys(connection, cursor, table, column):
    constraints = connection.introspection.get_constraints(cursor, table)
    for name, info in constraints.items():
        if info.get('foreign_key') and info.get('columns') == [column]:
            yield name, info['foreign_key']


def _rename(schema_editor, renames):
    connection = schema_editor.connection
    if connection.vendor not in ('postgresql', 'mysql'):
        return
    quote = schema_editor.quote_name

    with connection.cursor() as cursor:
        for (table, column), target in renames.items():
            for current, (ref_table, ref_column) in list(_generated_foreign_keys(connection, cursor, table, column)):
                if current == target:
                    continue
                if connection.vendor == 'postgresql':
                    schema_editor.execute(
                        f"ALTER TABLE {quote(table)} RENAME CONSTRAINT {quote(current)} TO {quote(target)}"
                    )
                else:
                    schema_editor.execute(
                        f"ALTER TABLE {quote(table)} DROP FOREIGN KEY {quote(current)}, "
                        f"ADD CONSTRAINT {quote(target)} FOREIGN KEY ({quote(column)}) "
                        f"REFERENCES {quote(ref_table)} ({quote(ref_column)}) "
                        f"ON DELETE NO ACTION ON UPDATE NO ACTION"
                    )


def name_foreign_keys(apps, schema_editor):
    _rename(schema_editor, FOREIGN_KEY_NAMES)


class Migration(migrations.Migration):

    dependencies = [
        ('shop', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(name_foreign_keys, migrations.RunPython.noop),
    ]
