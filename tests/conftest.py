import pytest
import pytest_asyncio

from venti_assistant.storage.database import Database
from venti_assistant.storage.tenant_repo import TenantDataRepository

SEED_SQL = """
INSERT INTO categories (id, tenant_id, name) VALUES
    ('c1', 't1', 'Ropa'),
    ('c2', 't1', 'Calzado'),
    ('c9', 't2', 'Ropa');

INSERT INTO products (id, tenant_id, category_id, name, sku, price, stock_quantity, status, deleted_at) VALUES
    ('p1', 't1', 'c1', 'Camiseta', 'TS-001', 20.0, 3, 'active', NULL),
    ('p2', 't1', 'c1', 'Pantalón', 'PA-001', 45.0, 0, 'active', NULL),
    ('p3', 't1', 'c2', 'Zapatos', 'ZA-001', 80.0, 50, 'active', NULL),
    ('p4', 't1', 'c1', 'Gorra', 'GO-001', 10.0, 1, 'archived', '2024-04-01T00:00:00'),
    ('p9', 't2', 'c9', 'Camiseta ajena', 'XX-001', 15.0, 2, 'active', NULL);

INSERT INTO orders (id, tenant_id, order_number, status, payment_status, total_amount,
                    customer_first_name, customer_last_name, customer_email, created_at) VALUES
    ('o1', 't1', 'STORE-2024-0001', 'delivered', 'paid', 100.0, 'Ana', 'Gómez', 'ana@example.com', '2024-05-01T10:00:00'),
    ('o2', 't1', 'STORE-2024-0002', 'cancelled', 'refunded', 50.0, 'Luis', 'Pérez', 'luis@example.com', '2024-05-02T10:00:00'),
    ('o3', 't1', 'STORE-2024-0003', 'pending', 'pending', 30.0, 'Luis', 'Pérez', 'luis@example.com', '2024-05-03T12:00:00'),
    ('o9', 't2', 'STORE-2024-0001', 'delivered', 'paid', 999.0, 'Eva', 'Ruiz', 'eva@example.com', '2024-05-01T09:00:00');

INSERT INTO order_items (id, tenant_id, order_id, product_id, product_name, quantity, unit_price, total_price) VALUES
    ('i1', 't1', 'o1', 'p1', 'Camiseta', 2, 20.0, 40.0),
    ('i2', 't1', 'o1', 'p2', 'Pantalón', 1, 60.0, 60.0),
    ('i3', 't1', 'o3', 'p3', 'Zapatos', 1, 30.0, 30.0),
    ('i9', 't2', 'o9', 'p9', 'Camiseta ajena', 1, 999.0, 999.0);

INSERT INTO discounts (id, tenant_id, code, type, value, status, usage_count, usage_limit) VALUES
    ('d1', 't1', 'VERANO', 'percentage', 10, 'active', 4, 100),
    ('d2', 't1', 'INVIERNO', 'percentage', 15, 'expired', 40, 40),
    ('d9', 't2', 'AJENO', 'fixed', 5, 'active', 0, NULL);
"""


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(str(tmp_path / "venti.db"))
    await database.initialize()
    yield database
    await database.close()


@pytest_asyncio.fixture
async def repo(db):
    await db.conn.executescript(SEED_SQL)
    await db.conn.commit()
    return TenantDataRepository(db)


@pytest.fixture
def tenant_id():
    return "t1"
