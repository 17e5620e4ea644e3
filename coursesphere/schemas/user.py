from pydantic import BaseModel


class Credentials(BaseModel):
    email: str
    password: str


class NewUser(BaseModel):
    """A user not yet stored locally, e.g. one typed into the roster screen."""

    name: str
    email: str
