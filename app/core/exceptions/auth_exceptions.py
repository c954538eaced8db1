from fastapi import HTTPException, status

WRONG_CREDENTIALS = 'Wrong credentials. Please try again.'
INCORRECT_PASSWORD = 'Current password is incorrect.'
SESSION_EXPIRED = 'Session expired. Please log out and log back in first.'


class WrongCredentials(HTTPException):
    def __init__(self):
        super().__init__(status.HTTP_401_UNAUTHORIZED, WRONG_CREDENTIALS, None)


class IncorrectPassword(HTTPException):
    def __init__(self):
        super().__init__(status.HTTP_401_UNAUTHORIZED, INCORRECT_PASSWORD, None)


class SessionExpired(HTTPException):
    def __init__(self):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            SESSION_EXPIRED,
            {'WWW-Authenticate': 'Bearer'},
        )


class ClubAccessDenied(HTTPException):
    def __init__(self, club: str):
        super().__init__(
            status.HTTP_403_FORBIDDEN,
            f'Admins of {club} are not allowed to access this resource',
            None,
        )
