from typing import Any, Dict, Optional

from pydantic import BaseModel


def api_success(data: Any) -> Dict[str, Any]:
	if isinstance(data, BaseModel):
		data = data.model_dump(mode="json")
	elif isinstance(data, list):
		data = [item.model_dump(mode="json") if isinstance(item, BaseModel) else item for item in data]
	return {"success": True, "data": data, "error": None}


def api_error(code: str, message: str, details: Optional[Any] = None) -> Dict[str, Any]:
	error: Dict[str, Any] = {"code": code, "message": message}
	if details is not None:
		error["details"] = details
	return {"success": False, "data": None, "error": error}
