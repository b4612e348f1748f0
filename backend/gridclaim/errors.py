class ValidationRejected(Exception):
    """A player request that was refused; ``message`` is shown to the player."""

    message = 'Request rejected.'

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class NameTaken(ValidationRejected):
    message = 'This name is already taken. Please choose a different one.'


class ReservedName(ValidationRejected):
    message = 'You cannot use the name "Admin". Please choose a different name.'


class InvalidName(ValidationRejected):
    message = 'Please enter a name.'


class AlreadyJoined(ValidationRejected):
    message = 'You have already joined the game.'
