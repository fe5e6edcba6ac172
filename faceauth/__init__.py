"""Face identity enrollment and authentication core."""
