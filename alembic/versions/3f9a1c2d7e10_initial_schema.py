"""initial_schema

Revision ID: 3f9a1c2d7e10
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Shared by volunteer and candidature, created once up front
document_type = postgresql.ENUM('CNIB', 'PASSPORT', name='documenttype', create_type=False)


def upgrade() -> None:
    """Upgrade schema."""
    sa.Enum('CNIB', 'PASSPORT', name='documenttype').create(op.get_bind(), checkfirst=True)

    op.create_table(
        'admin',
        sa.Column('first_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('last_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('username', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('id_admin', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id_admin')
    )
    op.create_index(op.f('ix_admin_email'), 'admin', ['email'], unique=False)
    op.create_index(op.f('ix_admin_username'), 'admin', ['username'], unique=True)

    op.create_table(
        'partner',
        sa.Column('structure_name', sqlmodel.sql.sqltypes.AutoString(length=150), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('phone', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('address', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('contact_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('contact_email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('contact_phone', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('contact_role', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('activity_domain', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=3000), nullable=False),
        sa.Column('website', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('id_partner', sa.Integer(), nullable=False),
        sa.Column('structure_types', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('activated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id_partner')
    )
    op.create_index(op.f('ix_partner_email'), 'partner', ['email'], unique=True)
    op.create_index(op.f('ix_partner_structure_name'), 'partner', ['structure_name'], unique=False)

    op.create_table(
        'volunteer',
        sa.Column('last_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('first_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('phone', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('birthdate', sa.Date(), nullable=True),
        sa.Column('nationality', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('sex', sqlmodel.sql.sqltypes.AutoString(length=1), nullable=True),
        sa.Column('address', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('region', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('education_level', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('education_field', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('skills', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column('motivation', sqlmodel.sql.sqltypes.AutoString(length=3000), nullable=True),
        sa.Column('availability', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('cv_url', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('document_type', document_type, nullable=True),
        sa.Column('document_number', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('document_url', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('id_volunteer', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum('CANDIDATE', 'WAITING', 'ACTIVE', 'INACTIVE', 'REFUSED', name='volunteerstatus'), nullable=False),
        sa.Column('registered_at', sa.DateTime(), nullable=False),
        sa.Column('validated_at', sa.DateTime(), nullable=True),
        sa.Column('internal_notes', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.PrimaryKeyConstraint('id_volunteer')
    )
    op.create_index(op.f('ix_volunteer_email'), 'volunteer', ['email'], unique=False)

    op.create_table(
        'project',
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=150), nullable=False),
        sa.Column('short_description', sqlmodel.sql.sqltypes.AutoString(length=300), nullable=False),
        sa.Column('long_description', sqlmodel.sql.sqltypes.AutoString(length=5000), nullable=False),
        sa.Column('activity_domain', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('mission_type', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('region', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('city', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('required_skills', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('volunteer_benefits', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('special_conditions', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('contact_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('contact_email', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('required_volunteers', sa.Integer(), nullable=False),
        sa.Column('date_start', sa.Date(), nullable=False),
        sa.Column('date_end', sa.Date(), nullable=False),
        sa.Column('application_deadline', sa.Date(), nullable=False),
        sa.Column('id_project', sa.Integer(), nullable=False),
        sa.Column('id_partner', sa.Integer(), nullable=False),
        sa.Column('current_volunteers', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'ACTIVE', 'CLOSED', name='projectstatus'), nullable=False),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['id_partner'], ['partner.id_partner'], ),
        sa.PrimaryKeyConstraint('id_project'),
        sa.CheckConstraint('current_volunteers >= 0', name='ck_project_current_volunteers_non_negative'),
        sa.CheckConstraint('current_volunteers <= required_volunteers', name='ck_project_capacity'),
    )
    op.create_index(op.f('ix_project_id_partner'), 'project', ['id_partner'], unique=False)
    op.create_index(op.f('ix_project_status'), 'project', ['status'], unique=False)

    op.create_table(
        'assignment',
        sa.Column('id_volunteer', sa.Integer(), nullable=False),
        sa.Column('id_project', sa.Integer(), nullable=False),
        sa.Column('role', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('id_assignment', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum('ACTIVE', 'FINISHED', 'CANCELLED', 'INACTIVE', name='assignmentstatus'), nullable=False),
        sa.Column('assigned_at', sa.DateTime(), nullable=False),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['id_project'], ['project.id_project'], ),
        sa.ForeignKeyConstraint(['id_volunteer'], ['volunteer.id_volunteer'], ),
        sa.PrimaryKeyConstraint('id_assignment')
    )
    op.create_index(op.f('ix_assignment_id_project'), 'assignment', ['id_project'], unique=False)
    op.create_index(op.f('ix_assignment_id_volunteer'), 'assignment', ['id_volunteer'], unique=False)
    op.create_index(op.f('ix_assignment_status'), 'assignment', ['status'], unique=False)

    op.create_table(
        'candidature',
        sa.Column('first_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('last_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('phone', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('document_type', document_type, nullable=False),
        sa.Column('document_number', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('requested_role', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('motivation_letter', sqlmodel.sql.sqltypes.AutoString(length=5000), nullable=True),
        sa.Column('skills', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column('availability', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('experience_level', sa.Enum('BEGINNER', 'INTERMEDIATE', 'EXPERT', name='experiencelevel'), nullable=True),
        sa.Column('id_candidature', sa.Integer(), nullable=False),
        sa.Column('id_volunteer', sa.Integer(), nullable=True),
        sa.Column('id_project', sa.Integer(), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'INTERVIEW', 'ACCEPTED', 'REJECTED', name='candidaturestatus'), nullable=False),
        sa.Column('internal_notes', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('interview_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['id_project'], ['project.id_project'], ),
        sa.PrimaryKeyConstraint('id_candidature')
    )
    op.create_index(op.f('ix_candidature_email'), 'candidature', ['email'], unique=False)
    op.create_index(op.f('ix_candidature_id_project'), 'candidature', ['id_project'], unique=False)
    op.create_index(op.f('ix_candidature_id_volunteer'), 'candidature', ['id_volunteer'], unique=False)
    op.create_index(op.f('ix_candidature_status'), 'candidature', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_candidature_status'), table_name='candidature')
    op.drop_index(op.f('ix_candidature_id_volunteer'), table_name='candidature')
    op.drop_index(op.f('ix_candidature_id_project'), table_name='candidature')
    op.drop_index(op.f('ix_candidature_email'), table_name='candidature')
    op.drop_table('candidature')
    op.drop_index(op.f('ix_assignment_status'), table_name='assignment')
    op.drop_index(op.f('ix_assignment_id_volunteer'), table_name='assignment')
    op.drop_index(op.f('ix_assignment_id_project'), table_name='assignment')
    op.drop_table('assignment')
    op.drop_index(op.f('ix_project_status'), table_name='project')
    op.drop_index(op.f('ix_project_id_partner'), table_name='project')
    op.drop_table('project')
    op.drop_index(op.f('ix_volunteer_email'), table_name='volunteer')
    op.drop_table('volunteer')
    op.drop_index(op.f('ix_partner_structure_name'), table_name='partner')
    op.drop_index(op.f('ix_partner_email'), table_name='partner')
    op.drop_table('partner')
    op.drop_index(op.f('ix_admin_username'), table_name='admin')
    op.drop_index(op.f('ix_admin_email'), table_name='admin')
    op.drop_table('admin')

    bind = op.get_bind()
    for name in (
        'candidaturestatus',
        'experiencelevel',
        'assignmentstatus',
        'projectstatus',
        'volunteerstatus',
        'documenttype',
    ):
        sa.Enum(name=name).drop(bind, checkfirst=True)
