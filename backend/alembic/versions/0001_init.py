from alembic import op
import sqlalchemy as sa

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'driver',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('driver_number', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('phone_number', sa.String(length=32), nullable=False),
        sa.Column('license_number', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_driver_driver_number', 'driver', ['driver_number'], unique=True)

    op.create_table(
        'vehicle',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('vehicle_number', sa.String(length=64), nullable=False),
        sa.Column('type', sa.String(length=40), nullable=False),
        sa.Column('fuel_capacity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_fuel', sa.Integer(), nullable=True),
        sa.Column('current_mileage', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_vehicle_vehicle_number', 'vehicle', ['vehicle_number'], unique=True)

    op.create_table(
        'trip',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('driver_number', sa.String(length=64), sa.ForeignKey('driver.driver_number'), nullable=False),
        sa.Column('vehicle_number', sa.String(length=64), sa.ForeignKey('vehicle.vehicle_number'), nullable=False),
        sa.Column('temporary_username', sa.String(length=64), nullable=False),
        sa.Column('temporary_password_hash', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_trip_driver_number', 'trip', ['driver_number'])
    op.create_index('ix_trip_vehicle_number', 'trip', ['vehicle_number'])
    op.create_index('ix_trip_temporary_username', 'trip', ['temporary_username'], unique=True)
    op.create_index('ix_trip_status', 'trip', ['status'])
    op.create_index('ix_trip_created_at', 'trip', ['created_at'])
    op.create_index('ix_trip_status_created', 'trip', ['status', 'created_at'])

    op.create_table(
        'emergency',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('driver_number', sa.String(length=64), sa.ForeignKey('driver.driver_number'), nullable=False),
        sa.Column('vehicle_number', sa.String(length=64), sa.ForeignKey('vehicle.vehicle_number'), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('video_url', sa.String(length=512), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('acknowledged_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_emergency_driver_number', 'emergency', ['driver_number'])
    op.create_index('ix_emergency_vehicle_number', 'emergency', ['vehicle_number'])
    op.create_index('ix_emergency_status', 'emergency', ['status'])
    op.create_index('ix_emergency_created_at', 'emergency', ['created_at'])
    op.create_index('ix_emergency_pair_status', 'emergency', ['driver_number', 'vehicle_number', 'status'])

def downgrade() -> None:
    op.drop_table('emergency')
    op.drop_table('trip')
    op.drop_index('ix_vehicle_vehicle_number', table_name='vehicle')
    op.drop_table('vehicle')
    op.drop_index('ix_driver_driver_number', table_name='driver')
    op.drop_table('driver')
