"""Infrastructure: Firestore persistence and security primitives."""
