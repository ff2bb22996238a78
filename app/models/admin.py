from sqlmodel import SQLModel, Field


class AdminBase(SQLModel):
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: str = Field(index=True)
    username: str = Field(unique=True, index=True)


class Admin(AdminBase, table=True):
    id_admin: int | None = Field(default=None, primary_key=True)
    # Revoking this flag withdraws administrative capability immediately
    is_active: bool = Field(default=True)


class AdminCreate(AdminBase):
    pass


class AdminPublic(AdminBase):
    id_admin: int
    is_active: bool
