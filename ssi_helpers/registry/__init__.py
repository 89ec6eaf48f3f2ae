from .lei import LeiRegistry, build_user_record_from_lei, lei_record_to_user_record


__all__ = ["LeiRegistry", "build_user_record_from_lei", "lei_record_to_user_record"]
