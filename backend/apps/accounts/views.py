"""
Accounts views for authentication.
"""
from rest_framework import generics, permissions

from .serializers import CurrentUserSerializer


class CurrentUserView(generics.RetrieveAPIView):
    """Get the current authenticated user, flagged with dashboard access."""
    serializer_class = CurrentUserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user
