"""create_data_room_tables

Revision ID: 4c1d7e2a9b30
Revises:
Create Date: 2026-09-14 10:22:41.518302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c1d7e2a9b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create organization, data room and guest access tables."""
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table('organizations',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('user_roles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.CheckConstraint("role IN ('admin', 'moderator', 'member')"),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'organization_id'),
    )
    op.create_index('ix_user_roles_user_id', 'user_roles', ['user_id'], unique=False)

    op.create_table('data_rooms',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.UUID(), nullable=True),
        sa.Column('nda_required', sa.Boolean(), nullable=True),
        sa.Column('nda_content', sa.Text(), nullable=True),
        sa.Column('nda_content_hash', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_data_rooms_organization_id', 'data_rooms', ['organization_id'], unique=False)

    op.create_table('data_room_folders',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('data_room_id', sa.UUID(), nullable=False),
        sa.Column('parent_id', sa.UUID(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['data_room_id'], ['data_rooms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parent_id'], ['data_room_folders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_data_room_folders_data_room_id', 'data_room_folders', ['data_room_id'], unique=False)

    op.create_table('data_room_invites',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('data_room_id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('access_password', sa.String(length=64), nullable=True),
        sa.Column('access_id', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('guest_name', sa.String(length=255), nullable=True),
        sa.Column('nda_signed_at', sa.DateTime(), nullable=True),
        sa.Column('invited_by', sa.UUID(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("status IN ('pending', 'accepted', 'revoked')"),
        sa.ForeignKeyConstraint(['data_room_id'], ['data_rooms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['invited_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('access_id'),
    )
    op.create_index('ix_data_room_invites_email_status', 'data_room_invites', ['email', 'status'], unique=False)
    op.create_index('ix_data_room_invites_room_email', 'data_room_invites', ['data_room_id', 'email'], unique=False)

    op.create_table('data_room_nda_signatures',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('data_room_id', sa.UUID(), nullable=False),
        sa.Column('signer_name', sa.String(length=255), nullable=False),
        sa.Column('signer_email', sa.String(length=255), nullable=False),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('nda_content_hash', sa.String(length=64), nullable=True),
        sa.Column('signed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['data_room_id'], ['data_rooms.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_data_room_nda_signatures_data_room_id',
        'data_room_nda_signatures',
        ['data_room_id'],
        unique=False,
    )

    # Root rows have parent_file_id NULL; versions point at their root
    op.create_table('data_room_files',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('data_room_id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('folder_id', sa.UUID(), nullable=True),
        sa.Column('name', sa.String(length=500), nullable=False),
        sa.Column('file_path', sa.String(length=1000), nullable=False),
        sa.Column('file_size', sa.BigInteger(), nullable=True),
        sa.Column('mime_type', sa.String(length=255), nullable=True),
        sa.Column('is_restricted', sa.Boolean(), nullable=True),
        sa.Column('parent_file_id', sa.UUID(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='not_opened'),
        sa.Column('uploaded_by', sa.UUID(), nullable=True),
        sa.Column('assigned_to', sa.UUID(), nullable=True),
        sa.Column('assigned_guest_id', sa.UUID(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('version >= 1', name='ck_data_room_files_version'),
        sa.CheckConstraint(
            "status IN ('not_opened', 'in_review', 'review_failed', 'being_amended', 'completed')"
        ),
        sa.ForeignKeyConstraint(['data_room_id'], ['data_rooms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['folder_id'], ['data_room_folders.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['parent_file_id'], ['data_room_files.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['uploaded_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['assigned_to'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['assigned_guest_id'], ['data_room_invites.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_data_room_files_room_parent',
        'data_room_files',
        ['data_room_id', 'parent_file_id'],
        unique=False,
    )
    op.create_index(
        'uq_data_room_files_chain_version',
        'data_room_files',
        [sa.text('COALESCE(parent_file_id, id)'), 'version'],
        unique=True,
    )

    op.create_table('data_room_document_content',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('file_id', sa.UUID(), nullable=False),
        sa.Column('data_room_id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('content_type', sa.String(length=20), nullable=False, server_default='rich_text'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['file_id'], ['data_room_files.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['data_room_id'], ['data_rooms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('file_id'),
    )

    op.create_table('data_room_file_comments',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('file_id', sa.UUID(), nullable=False),
        sa.Column('data_room_id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('commenter_name', sa.String(length=255), nullable=False),
        sa.Column('commenter_email', sa.String(length=255), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('is_guest', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['file_id'], ['data_room_files.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['data_room_id'], ['data_rooms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_data_room_file_comments_file_id', 'data_room_file_comments', ['file_id'], unique=False
    )

    # Exactly one grantee per row: a guest invite or an organization user
    op.create_table('data_room_file_permissions',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('file_id', sa.UUID(), nullable=False),
        sa.Column('guest_invite_id', sa.UUID(), nullable=True),
        sa.Column('user_id', sa.UUID(), nullable=True),
        sa.Column('permission_level', sa.String(length=10), nullable=False, server_default='view'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("permission_level IN ('view', 'edit')"),
        sa.CheckConstraint(
            '(guest_invite_id IS NULL) <> (user_id IS NULL)', name='ck_file_permissions_grantee'
        ),
        sa.ForeignKeyConstraint(['file_id'], ['data_room_files.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['guest_invite_id'], ['data_room_invites.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('file_id', 'guest_invite_id'),
    )
    op.create_index(
        'ix_data_room_file_permissions_file_id',
        'data_room_file_permissions',
        ['file_id'],
        unique=False,
    )

    op.create_table('data_room_messages',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('data_room_id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('sender_id', sa.UUID(), nullable=True),
        sa.Column('sender_name', sa.String(length=255), nullable=False),
        sa.Column('sender_email', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_guest', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['data_room_id'], ['data_rooms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_data_room_messages_data_room_id', 'data_room_messages', ['data_room_id'], unique=False)

    op.create_table('data_room_activity',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('data_room_id', sa.UUID(), nullable=False),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('user_name', sa.String(length=255), nullable=False),
        sa.Column('user_email', sa.String(length=255), nullable=False),
        sa.Column('is_guest', sa.Boolean(), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('details', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['data_room_id'], ['data_rooms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_data_room_activity_room_created',
        'data_room_activity',
        ['data_room_id', 'created_at'],
        unique=False,
    )


def downgrade() -> None:
    """Drop data room and guest access tables."""
    op.drop_index('ix_data_room_activity_room_created', table_name='data_room_activity')
    op.drop_table('data_room_activity')

    op.drop_index('ix_data_room_messages_data_room_id', table_name='data_room_messages')
    op.drop_table('data_room_messages')

    op.drop_index('ix_data_room_file_permissions_file_id', table_name='data_room_file_permissions')
    op.drop_table('data_room_file_permissions')

    op.drop_index('ix_data_room_file_comments_file_id', table_name='data_room_file_comments')
    op.drop_table('data_room_file_comments')

    op.drop_table('data_room_document_content')

    op.drop_index('uq_data_room_files_chain_version', table_name='data_room_files')
    op.drop_index('ix_data_room_files_room_parent', table_name='data_room_files')
    op.drop_table('data_room_files')

    op.drop_index('ix_data_room_nda_signatures_data_room_id', table_name='data_room_nda_signatures')
    op.drop_table('data_room_nda_signatures')

    op.drop_index('ix_data_room_invites_room_email', table_name='data_room_invites')
    op.drop_index('ix_data_room_invites_email_status', table_name='data_room_invites')
    op.drop_table('data_room_invites')

    op.drop_index('ix_data_room_folders_data_room_id', table_name='data_room_folders')
    op.drop_table('data_room_folders')

    op.drop_index('ix_data_rooms_organization_id', table_name='data_rooms')
    op.drop_table('data_rooms')

    op.drop_index('ix_user_roles_user_id', table_name='user_roles')
    op.drop_table('user_roles')

    op.drop_table('organizations')
    op.drop_table('profiles')
