"""SkillBuilder: learning collections, materials and XP progress."""
