"""Flora & Fauna interactive species library with offline archive export."""
