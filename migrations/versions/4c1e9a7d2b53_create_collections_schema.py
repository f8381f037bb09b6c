"""create_collections_schema

Revision ID: 4c1e9a7d2b53
Revises:
Create Date: 2026-10-18 09:12:44.201937

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c1e9a7d2b53'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, follows, saved items, collections and community posts."""
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=False, server_default='User'),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('data', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='{}'),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('follower_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('following_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('collections_seeded', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_id'),
        sa.UniqueConstraint('username'),
    )

    op.create_table('user_follows',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('follower_id', sa.UUID(), nullable=False),
        sa.Column('following_id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('follower_id != following_id', name='ck_user_follows_not_self'),
        sa.ForeignKeyConstraint(['follower_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['following_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('follower_id', 'following_id'),
    )
    op.create_index('ix_user_follows_follower_id', 'user_follows', ['follower_id'], unique=False)
    op.create_index('ix_user_follows_following_id', 'user_follows', ['following_id'], unique=False)

    op.create_table('saved_items',
        sa.Column('profile_id', sa.UUID(), nullable=False),
        sa.Column('product_id', sa.String(length=255), nullable=False),
        sa.Column('product', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='{}'),
        sa.Column('saved_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('profile_id', 'product_id'),
    )
    # Newest-first listing per profile
    op.create_index('ix_saved_items_profile_saved_at', 'saved_items', ['profile_id', 'saved_at'], unique=False)

    op.create_table('collections',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('profile_id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('color', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('custom_banner_url', sa.String(length=1000), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    # Creation-order listing per profile
    op.create_index('ix_collections_profile_created', 'collections', ['profile_id', 'created_at'], unique=False)

    op.create_table('collection_items',
        sa.Column('collection_id', sa.UUID(), nullable=False),
        sa.Column('product_id', sa.String(length=255), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('added_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['collection_id'], ['collections.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('collection_id', 'product_id'),
    )
    # Unsave strips a product from every collection
    op.create_index('ix_collection_items_product_id', 'collection_items', ['product_id'], unique=False)

    op.create_table('community_posts',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('profile_id', sa.UUID(), nullable=False),
        sa.Column('collection_id', sa.UUID(), nullable=True),
        sa.Column('post_type', sa.String(length=20), nullable=False, server_default='collection'),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('like_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('comment_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('share_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "post_type IN ('collection', 'image', 'text', 'product', 'link')",
            name='ck_community_posts_type',
        ),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['collection_id'], ['collections.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('profile_id', 'collection_id', name='uq_community_posts_collection'),
    )
    # Community feed: public posts, newest first
    op.create_index('ix_community_posts_public_created', 'community_posts', ['is_public', 'created_at'], unique=False)


def downgrade() -> None:
    """Drop the collections schema."""
    op.drop_index('ix_community_posts_public_created', table_name='community_posts')
    op.drop_table('community_posts')
    op.drop_index('ix_collection_items_product_id', table_name='collection_items')
    op.drop_table('collection_items')
    op.drop_index('ix_collections_profile_created', table_name='collections')
    op.drop_table('collections')
    op.drop_index('ix_saved_items_profile_saved_at', table_name='saved_items')
    op.drop_table('saved_items')
    op.drop_index('ix_user_follows_following_id', table_name='user_follows')
    op.drop_index('ix_user_follows_follower_id', table_name='user_follows')
    op.drop_table('user_follows')
    op.drop_table('profiles')
