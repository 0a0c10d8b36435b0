from typing import List, Optional

from schemas.event import TeamSizeRange
from schemas.registration import (
    RegistrationForm,
    TeamMember,
    TEAM_LEADER_ROLE,
)
from schemas.user import CurrentUser


class LeaderNotEditable(ValueError):
    pass


class RegistrationComposer:
    """
    Keeps a registration form consistent with the event's team size bounds.

    The member at index 0 is always the authenticated user acting as team
    leader; it is rebuilt from the session on every change instead of being
    edited by hand.
    """

    def __init__(self, team_size: TeamSizeRange, user: CurrentUser,
                 form: Optional[RegistrationForm] = None):
        self.team_size = team_size
        self.user = user
        if form is None:
            form = RegistrationForm(institution=user.institution)
            self.form = form
            self.set_team_size(team_size.min)
        else:
            self.form = form

    def clamp(self, requested: int) -> int:
        return max(self.team_size.min, min(requested, self.team_size.max))

    def leader(self) -> TeamMember:
        return TeamMember(
            name=self.user.name,
            email=self.user.email,
            phone=self.form.phone,
            role=TEAM_LEADER_ROLE,
            institution=self.form.institution,
        )

    def set_team_size(self, requested: int) -> int:
        size = self.clamp(requested)
        previous = self.form.teamMembers
        members = [self.leader()]
        for index in range(1, size):
            if index < len(previous):
                members.append(previous[index].model_copy())
            else:
                members.append(TeamMember())
        self.form.teamSize = size
        self.form.teamMembers = members
        return size

    def update_fields(self, **fields) -> None:
        """
        Applies contact-section changes.

        :raises pydantic.ValidationError: If a value does not fit the form,
            e.g. an explicit null for a text field.
        """
        self.form = RegistrationForm.model_validate({**self.form.model_dump(), **fields})
        # leader mirrors the phone/institution typed in the contact section
        if self.form.teamMembers:
            self.form.teamMembers[0] = self.leader()

    def update_member(self, index: int, **fields) -> TeamMember:
        if index == 0:
            raise LeaderNotEditable("Team leader details come from your account")
        if index < 0 or index >= len(self.form.teamMembers):
            raise IndexError(f"No team member at position {index + 1}")
        current = self.form.teamMembers[index]
        member = TeamMember.model_validate({**current.model_dump(), **fields})
        self.form.teamMembers[index] = member
        return member

    def validate(self) -> List[str]:
        errors = []
        if not self.form.phone:
            errors.append("Phone number is required")

        if self.form.teamSize > 1:
            if not self.form.teamName:
                errors.append("Team name is required for team registrations")
            for index, member in enumerate(self.form.teamMembers[1:], start=1):
                if not member.name:
                    errors.append(f"Team member {index + 1} name is required")
                if not member.email:
                    errors.append(f"Team member {index + 1} email is required")
        return errors

    def to_payload(self) -> dict:
        payload = self.form.model_dump(mode="json")
        if self.form.teamSize > 1:
            members = [self.leader()] + self.form.teamMembers[1:]
            payload["teamMembers"] = [m.model_dump() for m in members]
        else:
            payload["teamMembers"] = []
        return payload
