class BaseBlogqlException(Exception):
    pass


class AuthorizationError(BaseBlogqlException):
    """ No authenticated identity where one is required

    Reported by the resolver chain when neither an identity nor a credential is present,
    and by mutations when the identity does not own the entity it tries to change.
    """

    def __init__(self, err: str = 'Unauthorized! Token not provided!'):
        super().__init__(err)


class InvalidTokenError(AuthorizationError):
    """ A credential was provided, but it failed verification """

    def __init__(self, name: str, err: str):
        self.name = name
        super().__init__(f'{name}: {err}')


class NotFoundError(BaseBlogqlException):
    """ An entity that must exist was not found

    Loaders never raise it: they give `None`. Resolvers decide whether absence is an error.
    """

    def __init__(self, entity: str, id):
        self.entity = entity
        self.id = id

        super().__init__(f'{entity} with id: {id} not found')


class InvalidColumnError(BaseBlogqlException):
    """ A projection or a filter mentioned an invalid column name

    Reported when a column mentioned by name is not found on the table
    """

    def __init__(self, table: str, column_name: str, where: str):
        self.table = table
        self.column_name = column_name
        self.where = where

        super().__init__(f'Invalid column "{column_name}" for "{table}" specified in {where}')


class StoreError(BaseBlogqlException):
    """ Backing-store fault: connectivity or query error

    This class is used to augment the original error
    """
